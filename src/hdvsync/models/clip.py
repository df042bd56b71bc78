"""Clip identity model."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict


class ClipContext(BaseModel):
    """Resolved clip identity, produced once by the format check.

    root_path is the clip's top-level folder (the one holding VIDEO/HVR) and
    clip_name the logical clip name, e.g. "00_0001_2007-08-06_165555".
    """

    model_config = ConfigDict(frozen=True)

    root_path: Path
    clip_name: str

    @property
    def clip_path(self) -> Path:
        """Return the logical clip path <root>/<clip>."""
        return self.root_path / self.clip_name
