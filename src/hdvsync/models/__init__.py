"""Pydantic models for hdvsync."""

from .clip import ClipContext
from .index import (
    DATE_PRESENT_TAG,
    FILE_RECORD_SIZE,
    HEADER_SIZE,
    BinaryIndexRecord,
    FileInfoRecord,
    IndexHeader,
)
from .sync import SyncResult
from .technical import (
    DROP_FRAME_CODES,
    FRAME_RATES,
    DecodedIndex,
    FrameRate,
    TechnicalMetadata,
    Timecode,
    frame_rate_for_code,
)

__all__ = [
    # Clip
    "ClipContext",
    "SyncResult",
    # Raw index
    "IndexHeader",
    "FileInfoRecord",
    "BinaryIndexRecord",
    "HEADER_SIZE",
    "FILE_RECORD_SIZE",
    "DATE_PRESENT_TAG",
    # Technical
    "TechnicalMetadata",
    "FrameRate",
    "Timecode",
    "DecodedIndex",
    "FRAME_RATES",
    "DROP_FRAME_CODES",
    "frame_rate_for_code",
]
