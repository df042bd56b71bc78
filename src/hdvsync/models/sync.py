"""Sync outcome model."""

from pathlib import Path

from pydantic import BaseModel, Field

from .technical import TechnicalMetadata


class SyncResult(BaseModel):
    """What one sync run found and did for a clip."""

    clip_name: str
    sidecar_path: Path
    decision: str | None = None  # unchanged / first_sync / stale
    changed: list[str] = Field(default_factory=list)
    written: bool = False
    technical: TechnicalMetadata | None = None

    @property
    def is_noop(self) -> bool:
        return not self.changed and not self.written
