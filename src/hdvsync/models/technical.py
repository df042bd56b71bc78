"""Technical metadata decoded from an .IDX index file."""

from pydantic import BaseModel, ConfigDict

from .index import BinaryIndexRecord


class FrameRate(BaseModel):
    """Frame rate descriptor for one eccTb frame-rate code."""

    model_config = ConfigDict(frozen=True)

    code: int
    sample_scale: int
    sample_size: int
    label: str

    @property
    def is_drop_frame_capable(self) -> bool:
        return self.code in DROP_FRAME_CODES


# Closed table of recognized codes; anything else means "no frame rate".
# Code 0 is not valid in the format but occurs in real files.
FRAME_RATES: dict[int, FrameRate] = {
    1: FrameRate(code=1, sample_scale=24000, sample_size=1001, label="23.98p"),
    3: FrameRate(code=3, sample_scale=25, sample_size=1, label="25p"),
    4: FrameRate(code=4, sample_scale=30000, sample_size=1001, label="29.97p"),
    11: FrameRate(code=11, sample_scale=25, sample_size=1, label="50i"),
    12: FrameRate(code=12, sample_scale=30000, sample_size=1001, label="59.94i"),
}

DROP_FRAME_CODES = frozenset({4, 12})


def frame_rate_for_code(code: int) -> FrameRate | None:
    """Return the frame rate for an eccTb code, or None if unrecognized."""
    return FRAME_RATES.get(code)


class Timecode(BaseModel):
    """SMPTE-style start timecode."""

    model_config = ConfigDict(frozen=True)

    hours: int
    minutes: int
    seconds: int
    frames: int
    drop_frame: bool = False

    @property
    def separator(self) -> str:
        return ";" if self.drop_frame else ":"

    @property
    def formatted(self) -> str:
        """Return HH:MM:SS:FF, or HH;MM;SS;FF for drop-frame."""
        sep = self.separator
        return (
            f"{self.hours:02d}{sep}{self.minutes:02d}{sep}"
            f"{self.seconds:02d}{sep}{self.frames:02d}"
        )

    def __str__(self) -> str:
        return self.formatted


class TechnicalMetadata(BaseModel):
    """Technical facts for one clip, as recorded by the camera.

    Frame size and pixel aspect ratio are only known for HD material. Every
    field that depends on the frame rate (duration scale, start timecode and
    its format) is None when the rate code is unrecognized.
    """

    model_config = ConfigDict(frozen=True)

    is_standard_definition: bool
    is_progressive: bool
    frame_rate_code: int

    frame_width: int | None = None
    frame_height: int | None = None
    frame_unit: str | None = None
    pixel_aspect_ratio: str | None = None

    frame_rate: FrameRate | None = None
    total_frames: int = 0
    start_timecode: Timecode | None = None
    timecode_format: str | None = None

    # YYYY-MM-DDThh:mm:ssZ, recorded verbatim without timezone conversion
    creation_date: str | None = None

    @property
    def sample_scale(self) -> int | None:
        return self.frame_rate.sample_scale if self.frame_rate else None

    @property
    def sample_size(self) -> int | None:
        return self.frame_rate.sample_size if self.frame_rate else None

    @property
    def frame_rate_label(self) -> str | None:
        return self.frame_rate.label if self.frame_rate else None

    @property
    def duration_scale(self) -> str | None:
        """Return the duration scale as "sampleSize/sampleScale"."""
        if not self.frame_rate:
            return None
        return f"{self.frame_rate.sample_size}/{self.frame_rate.sample_scale}"

    @property
    def duration_seconds(self) -> float | None:
        if not self.frame_rate:
            return None
        rate = self.frame_rate
        return self.total_frames * rate.sample_size / rate.sample_scale

    @property
    def resolution(self) -> str | None:
        """Return frame size as WxH string."""
        if self.frame_width and self.frame_height:
            return f"{self.frame_width}x{self.frame_height}"
        return None


class DecodedIndex(BaseModel):
    """Result of decoding an index file for one clip."""

    model_config = ConfigDict(frozen=True)

    record: BinaryIndexRecord
    technical: TechnicalMetadata
