"""Raw .IDX index file models."""

from pydantic import BaseModel, ConfigDict

HEADER_SIZE = 16
FILE_RECORD_SIZE = 16

# Type tag of a file-info record whose date/time bytes were actually recorded
DATE_PRESENT_TAG = b"DT"


class IndexHeader(BaseModel):
    """Fixed 16-byte header of an .IDX file.

    Layout: id[8] valid[1] reserved[1] eccTb[1] signalMode[1] countDigits[4].
    """

    model_config = ConfigDict(frozen=True)

    raw: bytes
    identifier: bytes
    valid_flag: int
    reserved: int
    ecc_tb: int
    signal_mode: int
    file_count: int

    @property
    def is_progressive(self) -> bool:
        return (self.ecc_tb & 0x80) != 0

    @property
    def frame_rate_code(self) -> int:
        """Low three bits of eccTb, offset by 8 for interlaced material."""
        return (self.ecc_tb & 0x07) + (0 if self.is_progressive else 8)

    @property
    def is_standard_definition(self) -> bool:
        return self.signal_mode in (0x00, 0x80)


class FileInfoRecord(BaseModel):
    """One 16-byte file-info record.

    Layout: typeTag[2] year month day hour minute second startTimecode[4]
    totalFrameCount[4] (big-endian). The year byte is offset from 2000.
    """

    model_config = ConfigDict(frozen=True)

    raw: bytes
    type_tag: bytes
    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int
    start_timecode: bytes
    total_frames: int

    @property
    def has_date(self) -> bool:
        return self.type_tag == DATE_PRESENT_TAG

    @property
    def date_time_suffix(self) -> str:
        """Date/time string the clip's file names carry, e.g. "2007-08-06_165555"."""
        return (
            f"{self.year + 2000:02d}-{self.month:02d}-{self.day:02d}_"
            f"{self.hour:02d}{self.minute:02d}{self.second:02d}"
        )


class BinaryIndexRecord(BaseModel):
    """Header plus the matched file-info record, exactly as read from disk."""

    model_config = ConfigDict(frozen=True)

    header: IndexHeader
    record: FileInfoRecord

    @property
    def header_bytes(self) -> bytes:
        return self.header.raw

    @property
    def record_bytes(self) -> bytes:
        return self.record.raw

    @property
    def digest_bytes(self) -> bytes:
        """Bytes covered by the legacy digest: header then matched record."""
        return self.header.raw + self.record.raw
