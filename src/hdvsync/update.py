"""Persist an updated XMP container to its sidecar file.

Three strategies, chosen by the prior file state and the durability mode:

1. No sidecar was open: create the file and write the packet.
2. Sidecar open, fast mode: rewrite it in place (seek, truncate, write).
3. Sidecar open, safe mode: write a temp file in the same folder, close both
   files, delete the original and rename the temp file into its place.

In safe mode a failure before the delete leaves the original intact. A
failure between the delete and the rename loses the original; the temp file
then holds the complete new packet and its path is reported in the error.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import tempfile
from pathlib import Path
from typing import BinaryIO

from hdvsync.digest import set_stored_digest
from hdvsync.errors import SidecarWriteError
from hdvsync.log import get_logger
from hdvsync.xmp import XMPMeta


class UpdateCoordinator:
    """Writes the digest and serialized container for one sidecar path."""

    def __init__(self, sidecar_path: Path | str) -> None:
        self.sidecar_path = Path(sidecar_path)
        self.logger = get_logger(component="update", sidecar=self.sidecar_path.name)

    def update(
        self,
        meta: XMPMeta,
        digest: str,
        old_file: BinaryIO | None = None,
        safe: bool = True,
    ) -> bytes:
        """Store digest in meta, serialize it and write the sidecar.

        Args:
            meta: Container to persist
            digest: Digest of the index as it is right now
            old_file: Handle of the existing sidecar, opened for update
            safe: Use the temp-file-and-rename strategy for an existing sidecar

        Returns:
            The packet bytes written

        Raises:
            SidecarWriteError: If creating, writing or replacing the file fails
        """
        set_stored_digest(meta, digest)
        packet = meta.serialize()

        if old_file is None:
            self._create(packet)
            strategy = "create"
        elif not safe:
            self._overwrite(old_file, packet)
            strategy = "overwrite"
        else:
            self._safe_replace(old_file, packet)
            strategy = "safe_replace"

        self.logger.info("sidecar_written", strategy=strategy, size=len(packet))
        return packet

    def _create(self, packet: bytes) -> None:
        try:
            with open(self.sidecar_path, "wb") as f:
                f.write(packet)
        except OSError as e:
            raise SidecarWriteError(f"Failure creating {self.sidecar_path}: {e}") from e

    def _overwrite(self, old_file: BinaryIO, packet: bytes) -> None:
        try:
            with old_file:
                old_file.seek(0)
                old_file.truncate(0)
                old_file.write(packet)
        except OSError as e:
            raise SidecarWriteError(f"Failure rewriting {self.sidecar_path}: {e}") from e

    def _safe_replace(self, old_file: BinaryIO, packet: bytes) -> None:
        folder = self.sidecar_path.parent
        try:
            fd, temp_name = tempfile.mkstemp(
                prefix=f"{self.sidecar_path.name}.", suffix=".tmp", dir=folder
            )
        except OSError as e:
            old_file.close()
            raise SidecarWriteError(f"Failure creating temp file in {folder}: {e}") from e
        temp_path = Path(temp_name)

        try:
            with os.fdopen(fd, "wb") as temp:
                temp.write(packet)
            shutil.copymode(self.sidecar_path, temp_path)
        except OSError as e:
            old_file.close()
            with contextlib.suppress(OSError):
                temp_path.unlink()
            raise SidecarWriteError(f"Failure writing {temp_path}: {e}") from e

        old_file.close()

        try:
            os.remove(self.sidecar_path)
        except OSError as e:
            with contextlib.suppress(OSError):
                temp_path.unlink()
            raise SidecarWriteError(f"Failure deleting {self.sidecar_path}: {e}") from e

        try:
            os.rename(temp_path, self.sidecar_path)
        except OSError as e:
            self.logger.error("sidecar_replace_failed", temp=str(temp_path), error=str(e))
            raise SidecarWriteError(
                f"Original {self.sidecar_path} was removed but renaming {temp_path} "
                f"into place failed: {e}"
            ) from e
