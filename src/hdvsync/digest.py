"""Legacy digest of the index bytes a sidecar was synced from.

The digest is an MD5 over the index header followed by the clip's matched
file-info record, stored as 32 uppercase hex characters in
xmp:NativeDigests/xmp:SonyHDV. Comparing the stored digest with a fresh one
tells whether the sidecar already reflects the current index.
"""

from __future__ import annotations

import hashlib
from enum import Enum
from pathlib import Path

from hdvsync.decoder import read_index_record
from hdvsync.errors import ClipNotFound, IndexDecodeError, InvalidClipName, RecordNotFound
from hdvsync.locator import make_index_file_path
from hdvsync.log import get_logger
from hdvsync.xmp import NS_XMP, XMPMeta

DIGEST_STRUCT = "NativeDigests"
DIGEST_FIELD = "SonyHDV"

logger = get_logger(component="digest")


class GateDecision(str, Enum):
    """Outcome of comparing the stored digest with the current one."""

    UNCHANGED = "unchanged"  # stored digest matches, nothing to do
    FIRST_SYNC = "first_sync"  # no stored digest, fill gaps only
    STALE = "stale"  # stored digest differs, index is authoritative

    @property
    def needs_reconcile(self) -> bool:
        return self is not GateDecision.UNCHANGED

    @property
    def prior_digest_present(self) -> bool:
        return self is not GateDecision.FIRST_SYNC


def compute_digest(data: bytes) -> str:
    """Return the MD5 of data as 32 uppercase hex characters."""
    return hashlib.md5(data).hexdigest().upper()


def make_legacy_digest(root_path: Path | str, clip_name: str) -> str:
    """Digest the clip's header and file-info record as currently on disk.

    Returns an empty string when the clip's record cannot be read; the empty
    string is stored like any other digest.
    """
    try:
        index_path = make_index_file_path(root_path, clip_name)
        record = read_index_record(index_path, clip_name)
    except (ClipNotFound, InvalidClipName, RecordNotFound):
        return ""
    except IndexDecodeError as e:
        logger.warning("digest_unreadable_index", clip=clip_name, error=str(e))
        return ""
    return compute_digest(record.digest_bytes)


def get_stored_digest(meta: XMPMeta) -> str | None:
    """Return the stored digest, or None if the sidecar never had one."""
    return meta.get_struct_field(NS_XMP, DIGEST_STRUCT, NS_XMP, DIGEST_FIELD)


def set_stored_digest(meta: XMPMeta, digest: str) -> None:
    meta.set_struct_field(NS_XMP, DIGEST_STRUCT, NS_XMP, DIGEST_FIELD, digest)


def gate(stored: str | None, current: str | None) -> GateDecision:
    """Classify the sidecar state from the stored and current digests.

    current may be None when the caller has not computed it; that is only
    meaningful without a stored digest.
    """
    if stored is None:
        return GateDecision.FIRST_SYNC
    if current is not None and is_unchanged(stored, current):
        return GateDecision.UNCHANGED
    return GateDecision.STALE


def is_unchanged(stored: str | None, current: str) -> bool:
    """True when a stored digest exists and equals the current one."""
    return stored is not None and stored == current
