"""Sidecar handler for one Sony HDV clip.

Lifecycle: construct from a ClipContext (see locator.check_format), call
cache_file_data() to read the existing .XMP sidecar, process_xmp() to bring
it in line with the .IDX index, then update_file() if anything changed and
close(). sync_clip() runs the whole sequence for a path.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import BinaryIO

from hdvsync.config import HDVSyncConfig, get_config
from hdvsync.decoder import decode_index
from hdvsync.digest import GateDecision, gate, get_stored_digest, make_legacy_digest
from hdvsync.errors import (
    ClipNotFound,
    HDVError,
    InvalidClipName,
    OversizedSidecar,
    RecordNotFound,
    SidecarReadError,
)
from hdvsync.locator import (
    SIDECAR_EXTENSION,
    context_from_path,
    make_clip_file_path,
    make_index_file_path,
)
from hdvsync.log import get_logger
from hdvsync.models import ClipContext, DecodedIndex, SyncResult, TechnicalMetadata
from hdvsync.reconcile import reconcile
from hdvsync.update import UpdateCoordinator
from hdvsync.xmp import XMPMeta


class SonyHDVHandler:
    """Reads, reconciles and writes the XMP sidecar of one clip.

    Not safe for concurrent use; one handler serves one clip.
    """

    def __init__(
        self,
        context: ClipContext,
        open_for_update: bool = False,
        config: HDVSyncConfig | None = None,
    ) -> None:
        self.context = context
        self.open_for_update = open_for_update
        self.config = config or get_config()

        self.meta = XMPMeta()
        self.packet = b""
        self.contains_xmp = False
        self.processed_xmp = False
        self.needs_update = False

        self.decision: GateDecision | None = None
        self.technical: TechnicalMetadata | None = None
        self.changed: list[str] = []

        self._file: BinaryIO | None = None
        self.logger = get_logger(component="handler", clip=context.clip_name)

    @property
    def sidecar_path(self) -> Path:
        return make_clip_file_path(self.context, SIDECAR_EXTENSION)

    def make_legacy_digest(self) -> str:
        return make_legacy_digest(self.context.root_path, self.context.clip_name)

    def cache_file_data(self) -> None:
        """Read the sidecar, if there is one.

        The file is closed right away unless the handler was opened for
        update, in which case it stays open for update_file().

        Raises:
            OversizedSidecar: If the sidecar exceeds the configured limit
            SidecarReadError: If the sidecar cannot be opened or read
        """
        path = self.sidecar_path
        if not path.is_file():
            return

        limit = self.config.update.max_sidecar_bytes
        try:
            f = open(path, "r+b" if self.open_for_update else "rb")
        except OSError as e:
            raise SidecarReadError(f"Failure opening {path}: {e}") from e
        try:
            size = os.fstat(f.fileno()).st_size
            if size > limit:
                raise OversizedSidecar(f"{path.name} is {size} bytes, limit is {limit}")
            self.packet = f.read()
        except OSError as e:
            f.close()
            raise SidecarReadError(f"Failure reading {path}: {e}") from e
        except Exception:
            f.close()
            raise

        if self.open_for_update:
            self._file = f
        else:
            f.close()
        self.contains_xmp = True
        self.logger.debug("sidecar_read", size=len(self.packet))

    def process_xmp(self) -> None:
        """Parse the sidecar and apply the index's technical metadata.

        Runs once. A stored digest matching the index short-circuits
        everything. Otherwise the index is decoded and reconciled; an index
        or record that cannot be found leaves the metadata untouched.

        Raises:
            XMPParseError: If the sidecar is not valid XMP
            TruncatedIndex, CorruptIndex: If the index cannot be decoded
        """
        if self.processed_xmp:
            return
        self.processed_xmp = True

        if self.contains_xmp:
            self.meta = XMPMeta.parse(self.packet)

        stored = get_stored_digest(self.meta)
        current = self.make_legacy_digest() if stored is not None else None
        self.decision = gate(stored, current)
        if not self.decision.needs_reconcile:
            self.logger.info("digest_unchanged")
            return

        try:
            index_path = make_index_file_path(self.context.root_path, self.context.clip_name)
            decoded = decode_index(index_path, self.context.clip_name)
        except (ClipNotFound, InvalidClipName, RecordNotFound) as e:
            self.logger.info("no_index_record", reason=str(e))
            return

        self.technical = decoded.technical
        self.contains_xmp = True
        self.changed = reconcile(
            self.meta, decoded.technical, self.decision.prior_digest_present
        )
        # A stale digest is itself a change to the container
        if self.changed or self.decision is GateDecision.STALE:
            self.needs_update = True
        self.logger.info("processed", decision=self.decision.value, changed=self.changed)

    def get_xmp(self) -> XMPMeta:
        self.process_xmp()
        return self.meta

    def put_xmp(self, meta: XMPMeta) -> None:
        """Replace the metadata and flag the sidecar for writing."""
        self.processed_xmp = True
        self.meta = meta
        self.needs_update = True

    def update_file(self, safe: bool | None = None) -> bool:
        """Write the sidecar if it has been flagged dirty.

        Args:
            safe: Use the temp-file-and-rename strategy; defaults to the
                configured update.safe_update

        Returns:
            True if the sidecar was written

        Raises:
            HDVError: If the handler was opened read-only
            SidecarWriteError: If writing fails
        """
        if not self.needs_update:
            return False
        if not self.open_for_update:
            raise HDVError(f"Clip {self.context.clip_name} was not opened for update")
        self.needs_update = False

        if safe is None:
            safe = self.config.update.safe_update

        old_file, self._file = self._file, None
        UpdateCoordinator(self.sidecar_path).update(
            self.meta, self.make_legacy_digest(), old_file, safe=safe
        )
        return True

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> SonyHDVHandler:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def open_clip(
    path: Path | str,
    open_for_update: bool = False,
    config: HDVSyncConfig | None = None,
) -> SonyHDVHandler:
    """Resolve a clip path and return a handler with its sidecar read.

    Raises:
        ClipNotFound: If the path is not a Sony HDV clip
    """
    handler = SonyHDVHandler(context_from_path(path), open_for_update, config)
    try:
        handler.cache_file_data()
    except Exception:
        handler.close()
        raise
    return handler


def sync_clip(
    path: Path | str,
    safe: bool | None = None,
    dry_run: bool = False,
    config: HDVSyncConfig | None = None,
) -> SyncResult:
    """Bring a clip's XMP sidecar in line with its index file.

    Args:
        path: Logical clip path or a file inside VIDEO/HVR
        safe: Safe-update override; None uses the configuration
        dry_run: Compute the changes without writing anything

    Returns:
        SyncResult describing the decision and changed properties
    """
    with open_clip(path, open_for_update=not dry_run, config=config) as handler:
        handler.process_xmp()
        written = False if dry_run else handler.update_file(safe=safe)
        return SyncResult(
            clip_name=handler.context.clip_name,
            sidecar_path=handler.sidecar_path,
            decision=handler.decision.value if handler.decision else None,
            changed=handler.changed,
            written=written,
            technical=handler.technical,
        )


def inspect_clip(path: Path | str) -> DecodedIndex:
    """Decode a clip's index record without touching its sidecar.

    Raises:
        ClipNotFound, InvalidClipName, RecordNotFound, TruncatedIndex, CorruptIndex
    """
    context = context_from_path(path)
    index_path = make_index_file_path(context.root_path, context.clip_name)
    return decode_index(index_path, context.clip_name)
