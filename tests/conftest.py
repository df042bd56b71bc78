"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from hdvsync import config as config_module
from hdvsync.config import HDVSyncConfig

CLIP = "00_0001_2007-08-06_165555"

# eccTb values: high bit = progressive, low 3 bits = rate
ECC_23_98P = 0x81
ECC_25P = 0x83
ECC_29_97P = 0x84
ECC_50I = 0x03
ECC_59_94I = 0x04
ECC_INVALID = 0x80

SIGNAL_HD = 0x01
SIGNAL_SD = 0x00

# frames=4 with drop bit, seconds=3, minutes=2, hours=1
TIMECODE_01_02_03_04_DF = bytes([0x44, 0x03, 0x02, 0x01])


def make_header(
    count: int = 1,
    ecc_tb: int = ECC_29_97P,
    signal_mode: int = SIGNAL_HD,
    identifier: bytes = b"HDVINDEX",
    valid: int = 0x01,
) -> bytes:
    """Build a 16-byte .IDX header."""
    return identifier[:8].ljust(8, b"\0") + bytes([valid, 0, ecc_tb, signal_mode]) + (
        f"{count:04d}".encode("ascii")
    )


def make_record(
    year: int = 7,
    month: int = 8,
    day: int = 6,
    hour: int = 16,
    minute: int = 55,
    second: int = 55,
    timecode: bytes = TIMECODE_01_02_03_04_DF,
    total_frames: int = 1800,
    tag: bytes = b"DT",
) -> bytes:
    """Build a 16-byte file-info record; defaults match CLIP."""
    return (
        tag
        + bytes([year, month, day, hour, minute, second])
        + timecode
        + total_frames.to_bytes(4, "big")
    )


def make_clip_tree(root: Path, index_name: str = CLIP, index_data: bytes | None = None) -> Path:
    """Create <root>/VIDEO/HVR with one .IDX and matching .M2T; return the HVR folder."""
    hvr = root / "VIDEO" / "HVR"
    hvr.mkdir(parents=True, exist_ok=True)
    if index_data is None:
        index_data = make_header() + make_record()
    (hvr / f"{index_name}.IDX").write_bytes(index_data)
    (hvr / f"{index_name}.M2T").write_bytes(b"\x47" * 188)
    return hvr


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Keep user config files and HDVSYNC_* variables out of tests."""
    monkeypatch.setattr(config_module, "CONFIG_LOCATIONS", [])
    for key in ("SAFE_UPDATE", "MAX_SIDECAR_MB", "LOG_LEVEL", "LOG_FORMAT"):
        monkeypatch.delenv(f"HDVSYNC_{key}", raising=False)
    config_module.reset_config()
    yield
    config_module.reset_config()


@pytest.fixture
def config() -> HDVSyncConfig:
    return HDVSyncConfig()


@pytest.fixture
def clip_root(tmp_path) -> Path:
    """A clip tree holding one HD 29.97p clip with a date-stamped record."""
    root = tmp_path / "MyMovie"
    make_clip_tree(root)
    return root


@pytest.fixture
def clip_path(clip_root) -> Path:
    """Logical clip path <root>/<clip>."""
    return clip_root / CLIP


@pytest.fixture
def sidecar_path(clip_root) -> Path:
    return clip_root / "VIDEO" / "HVR" / f"{CLIP}.XMP"
