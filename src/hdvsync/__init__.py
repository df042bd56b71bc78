"""hdvsync - Sony HDV clip metadata sync.

Keeps the XMP sidecar of a Sony HDV folder clip in line with the technical
facts recorded in the clip's binary .IDX index file, without discarding
metadata that was written by hand.

Usage:
    from hdvsync import sync_clip, inspect_clip

    # Decode the index record for a clip
    decoded = inspect_clip("MyMovie/00_0001_2007-08-06_165555")
    print(decoded.technical.start_timecode)

    # Update the sidecar (writes only when something changed)
    result = sync_clip("MyMovie/00_0001_2007-08-06_165555")
    print(result.changed)
"""

from hdvsync._version import __version__
from hdvsync.decoder import decode_index, decode_technical, read_index_record
from hdvsync.digest import GateDecision, compute_digest, gate, make_legacy_digest
from hdvsync.errors import (
    ClipNotFound,
    CorruptIndex,
    HDVError,
    IndexDecodeError,
    InvalidClipName,
    OversizedSidecar,
    RecordNotFound,
    SidecarReadError,
    SidecarWriteError,
    TruncatedIndex,
    XMPParseError,
)
from hdvsync.handler import SonyHDVHandler, inspect_clip, open_clip, sync_clip
from hdvsync.locator import check_format, context_from_path, make_index_file_path
from hdvsync.models import (
    ClipContext,
    DecodedIndex,
    FrameRate,
    SyncResult,
    TechnicalMetadata,
    Timecode,
)
from hdvsync.reconcile import reconcile
from hdvsync.update import UpdateCoordinator
from hdvsync.xmp import XMPMeta

__all__ = [
    # Version
    "__version__",
    # Main functions
    "sync_clip",
    "inspect_clip",
    "open_clip",
    "SonyHDVHandler",
    # Pipeline steps
    "check_format",
    "context_from_path",
    "make_index_file_path",
    "read_index_record",
    "decode_index",
    "decode_technical",
    "compute_digest",
    "make_legacy_digest",
    "gate",
    "GateDecision",
    "reconcile",
    "UpdateCoordinator",
    # Models
    "ClipContext",
    "DecodedIndex",
    "FrameRate",
    "SyncResult",
    "TechnicalMetadata",
    "Timecode",
    "XMPMeta",
    # Errors
    "HDVError",
    "ClipNotFound",
    "InvalidClipName",
    "RecordNotFound",
    "IndexDecodeError",
    "TruncatedIndex",
    "CorruptIndex",
    "OversizedSidecar",
    "SidecarReadError",
    "SidecarWriteError",
    "XMPParseError",
]
