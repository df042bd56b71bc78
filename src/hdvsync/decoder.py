"""Decoder for the Sony HDV .IDX index file.

The index is a fixed 16-byte header followed by up to file_count 16-byte
file-info records, one per recorded segment. The record for a clip is the one
whose recorded date/time matches the date/time suffix of the clip name.
Decoding never mutates any metadata container.
"""

from __future__ import annotations

import struct
from pathlib import Path
from typing import BinaryIO

from hdvsync.errors import CorruptIndex, InvalidClipName, RecordNotFound, TruncatedIndex
from hdvsync.log import get_logger
from hdvsync.models import (
    FILE_RECORD_SIZE,
    HEADER_SIZE,
    BinaryIndexRecord,
    DecodedIndex,
    FileInfoRecord,
    FrameRate,
    IndexHeader,
    TechnicalMetadata,
    Timecode,
    frame_rate_for_code,
)

# "00_0001_2007-08-06_165555": camera/clip prefix, then the date/time suffix
CLIP_NAME_LENGTH = 25
DATE_TIME_OFFSET = 8

HD_FRAME_WIDTH = 1440
HD_FRAME_HEIGHT = 1080
HD_FRAME_UNIT = "pixels"
HD_PIXEL_ASPECT_RATIO = "4/3"

_HEADER_FORMAT = ">8s4B4s"
_RECORD_FORMAT = ">2s6B4sI"

# Timecode format label prefixes keyed by sample scale
_INTEGRAL_TIMECODE = {24: "24", 25: "25", 50: "50"}
_FRACTIONAL_TIMECODE = {24000: "23976", 30000: "2997", 60000: "5994"}

logger = get_logger(component="decoder")


def clip_date_time(clip_name: str) -> str:
    """Return the "YYYY-MM-DD_hhmmss" suffix of a full clip name.

    Raises:
        InvalidClipName: If the name does not have the fixed full-name length
    """
    if len(clip_name) != CLIP_NAME_LENGTH:
        raise InvalidClipName(
            f"Clip name {clip_name!r} is not a {CLIP_NAME_LENGTH}-character full clip name"
        )
    return clip_name[DATE_TIME_OFFSET:]


def parse_header(data: bytes) -> IndexHeader:
    """Parse the fixed 16-byte index header.

    Raises:
        TruncatedIndex: If fewer than 16 bytes are given
        CorruptIndex: If the file count is not four ASCII digits
    """
    if len(data) < HEADER_SIZE:
        raise TruncatedIndex(f"Index header is {len(data)} bytes, expected {HEADER_SIZE}")
    data = data[:HEADER_SIZE]
    identifier, valid, reserved, ecc_tb, signal_mode, digits = struct.unpack(_HEADER_FORMAT, data)
    if not all(0x30 <= b <= 0x39 for b in digits):
        raise CorruptIndex(f"Index file count is not ASCII digits: {digits!r}")
    return IndexHeader(
        raw=data,
        identifier=identifier,
        valid_flag=valid,
        reserved=reserved,
        ecc_tb=ecc_tb,
        signal_mode=signal_mode,
        file_count=int(digits.decode("ascii")),
    )


def parse_file_record(data: bytes) -> FileInfoRecord:
    """Parse one 16-byte file-info record.

    Raises:
        TruncatedIndex: If fewer than 16 bytes are given
    """
    if len(data) < FILE_RECORD_SIZE:
        raise TruncatedIndex(f"File record is {len(data)} bytes, expected {FILE_RECORD_SIZE}")
    data = data[:FILE_RECORD_SIZE]
    tag, year, month, day, hour, minute, second, timecode, total = struct.unpack(
        _RECORD_FORMAT, data
    )
    return FileInfoRecord(
        raw=data,
        type_tag=tag,
        year=year,
        month=month,
        day=day,
        hour=hour,
        minute=minute,
        second=second,
        start_timecode=timecode,
        total_frames=total,
    )


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) < size:
        raise TruncatedIndex(f"Index file ended after {len(data)} of {size} bytes")
    return data


def find_file_record(
    stream: BinaryIO, header: IndexHeader, date_time: str
) -> FileInfoRecord | None:
    """Scan the records following the header for one recorded at date_time.

    Reads at most header.file_count records and stops at the first match.

    Returns:
        The matching record, or None when the declared count is exhausted

    Raises:
        TruncatedIndex: If the stream ends before the count is exhausted
    """
    for _ in range(header.file_count):
        record = parse_file_record(_read_exact(stream, FILE_RECORD_SIZE))
        if record.date_time_suffix == date_time:
            return record
    return None


def read_index_record(index_path: Path | str, clip_name: str) -> BinaryIndexRecord:
    """Read the header and the clip's file-info record from an index file.

    Raises:
        InvalidClipName: Before any I/O, if clip_name is not a full clip name
        TruncatedIndex: If the file is shorter than its declared layout
        CorruptIndex: If the header is malformed
        RecordNotFound: If no record matches the clip's date/time
    """
    date_time = clip_date_time(clip_name)

    with open(index_path, "rb") as f:
        header = parse_header(_read_exact(f, HEADER_SIZE))
        record = find_file_record(f, header, date_time)

    if record is None:
        raise RecordNotFound(
            f"No record for {date_time} among {header.file_count} in {Path(index_path).name}"
        )
    return BinaryIndexRecord(header=header, record=record)


def _timecode_digits(byte: int, tens_mask: int) -> int:
    return ((byte & tens_mask) >> 4) * 10 + (byte & 0x0F)


def decode_timecode(data: bytes, frame_rate: FrameRate) -> Timecode:
    """Decode the packed 4-byte start timecode (frames, seconds, minutes, hours).

    The drop-frame flag (bit 0x40 of the frames byte) only counts for
    29.97p and 59.94i material.
    """
    frames_byte, seconds_byte, minutes_byte, hours_byte = data[:4]
    return Timecode(
        hours=_timecode_digits(hours_byte, 0x30),
        minutes=_timecode_digits(minutes_byte, 0x70),
        seconds=_timecode_digits(seconds_byte, 0x70),
        frames=_timecode_digits(frames_byte, 0x30),
        drop_frame=bool(frames_byte & 0x40) and frame_rate.is_drop_frame_capable,
    )


def timecode_format(frame_rate: FrameRate, drop_frame: bool) -> str:
    """Return the xmpDM timeFormat label for a frame rate.

    Only sample scale/size pairings from the frame-rate table are valid;
    anything else is a programming error.
    """
    scale, size = frame_rate.sample_scale, frame_rate.sample_size
    if size == 1:
        prefix = _INTEGRAL_TIMECODE.get(scale)
        if prefix is None:
            raise AssertionError(f"No timecode format for {scale} fps")
        return f"{prefix}Timecode"
    if size == 1001:
        prefix = _FRACTIONAL_TIMECODE.get(scale)
        if prefix is None:
            raise AssertionError(f"No timecode format for {scale}/1001 fps")
        return f"{prefix}{'DropTimecode' if drop_frame else 'NonDropTimecode'}"
    raise AssertionError(f"Unexpected sample size {size} for scale {scale}")


def decode_technical(header: IndexHeader, record: FileInfoRecord) -> TechnicalMetadata:
    """Derive the clip's technical metadata from its header and record."""
    frame_rate = frame_rate_for_code(header.frame_rate_code)
    is_sd = header.is_standard_definition

    start_timecode = None
    time_format = None
    if frame_rate is not None:
        start_timecode = decode_timecode(record.start_timecode, frame_rate)
        time_format = timecode_format(frame_rate, start_timecode.drop_frame)

    creation_date = None
    if record.has_date:
        creation_date = (
            f"{record.year + 2000:4d}-{record.month:02d}-{record.day:02d}"
            f"T{record.hour:02d}:{record.minute:02d}:{record.second:02d}Z"
        )

    return TechnicalMetadata(
        is_standard_definition=is_sd,
        is_progressive=header.is_progressive,
        frame_rate_code=header.frame_rate_code,
        frame_width=None if is_sd else HD_FRAME_WIDTH,
        frame_height=None if is_sd else HD_FRAME_HEIGHT,
        frame_unit=None if is_sd else HD_FRAME_UNIT,
        pixel_aspect_ratio=None if is_sd else HD_PIXEL_ASPECT_RATIO,
        frame_rate=frame_rate,
        total_frames=record.total_frames,
        start_timecode=start_timecode,
        timecode_format=time_format,
        creation_date=creation_date,
    )


def decode_index(index_path: Path | str, clip_name: str) -> DecodedIndex:
    """Read and decode the clip's technical metadata from an index file.

    Raises:
        InvalidClipName, TruncatedIndex, CorruptIndex, RecordNotFound
    """
    record = read_index_record(index_path, clip_name)
    technical = decode_technical(record.header, record.record)
    logger.debug(
        "index_decoded",
        index=Path(index_path).name,
        clip=clip_name,
        frame_rate=technical.frame_rate_label,
        frames=technical.total_frames,
    )
    return DecodedIndex(record=record, technical=technical)
