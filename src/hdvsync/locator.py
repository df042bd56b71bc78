"""Clip discovery for the Sony HDV folder layout.

A typical clip tree looks like:

    .../MyMovie/
        VIDEO/
            HVR/
                00_0001_2007-08-06_165555.IDX
                00_0001_2007-08-06_165555.M2T
                00_0001_2007-08-06_171740.M2T
                00_0001_2007-08-06_165555.XMP

The logical clip name is "00_0001" or "00_0001_" plus anything; only the part
before the second underscore selects the clip family. Folder and file names
are matched case-insensitively.
"""

from __future__ import annotations

import os
from pathlib import Path

from hdvsync.errors import ClipNotFound
from hdvsync.log import get_logger
from hdvsync.models import ClipContext

VIDEO_FOLDER = "VIDEO"
HVR_FOLDER = "HVR"
INDEX_EXTENSION = ".IDX"
SIDECAR_EXTENSION = ".XMP"

logger = get_logger(component="locator")


def clip_family_prefix(name: str) -> str:
    """Return the uppercased clip-family prefix, ending in an underscore.

    "00_0001" and "00_0001_2007-08-06_165555" both give "00_0001_".
    """
    underscores = 0
    for i, ch in enumerate(name):
        if ch == "_":
            underscores += 1
            if underscores == 2:
                name = name[:i]
                break
    return name.upper() + "_"


def scan_for_index(folder: Path, prefix: str) -> Path | None:
    """Find the first .IDX file in folder whose name starts with prefix.

    Entries are visited in directory enumeration order; the first match wins.
    """
    prefix = prefix.upper()
    try:
        entries = os.scandir(folder)
    except OSError:
        return None
    with entries:
        for entry in entries:
            if len(entry.name) < len(INDEX_EXTENSION):
                continue
            upper = entry.name.upper()
            if upper.endswith(INDEX_EXTENSION) and upper.startswith(prefix):
                return Path(folder) / entry.name
    return None


def _child_folder(parent: Path, name: str) -> Path | None:
    """Return the child folder matching name case-insensitively, if any."""
    exact = parent / name
    if exact.is_dir():
        return exact
    try:
        entries = os.scandir(parent)
    except OSError:
        return None
    with entries:
        for entry in entries:
            if entry.name.upper() == name.upper() and entry.is_dir():
                return Path(parent) / entry.name
    return None


def index_folder(root_path: Path | str) -> Path | None:
    """Return <root>/VIDEO/HVR if it exists."""
    video = _child_folder(Path(root_path), VIDEO_FOLDER)
    if video is None:
        return None
    return _child_folder(video, HVR_FOLDER)


def check_format(
    root_path: Path | str,
    gp_name: str,
    parent_name: str,
    leaf_name: str,
) -> ClipContext:
    """Decide whether a path is a Sony HDV clip and resolve its identity.

    For a logical clip path ".../MyMovie/00_0001" pass root_path=".../MyMovie",
    empty gp_name/parent_name and leaf_name="00_0001". For a full file path
    ".../MyMovie/VIDEO/HVR/00_0001_2007-08-06_165555.M2T" pass
    gp_name="VIDEO", parent_name="HVR" and the file name as leaf_name.

    Raises:
        ClipNotFound: If the layout does not match or no index file exists
    """
    root = Path(root_path).absolute()

    if bool(gp_name) != bool(parent_name):
        raise ClipNotFound(f"Incomplete clip path components under {root}")

    if not gp_name:
        folder = index_folder(root)
        if folder is None:
            raise ClipNotFound(f"No {VIDEO_FOLDER}/{HVR_FOLDER} folder under {root}")
        clip_name = leaf_name
    else:
        if gp_name.upper() != VIDEO_FOLDER or parent_name.upper() != HVR_FOLDER:
            raise ClipNotFound(f"Not inside {VIDEO_FOLDER}/{HVR_FOLDER}: {gp_name}/{parent_name}")
        folder = index_folder(root)
        if folder is None:
            raise ClipNotFound(f"No {VIDEO_FOLDER}/{HVR_FOLDER} folder under {root}")
        clip_name = os.path.splitext(leaf_name)[0]

    if scan_for_index(folder, clip_family_prefix(clip_name)) is None:
        raise ClipNotFound(f"No index file for clip {clip_name!r} in {folder}")

    # Spanned clips are not merged: the clip keeps the name it was opened with.
    logger.debug("clip_resolved", root=str(root), clip=clip_name)
    return ClipContext(root_path=root, clip_name=clip_name)


def context_from_path(path: Path | str) -> ClipContext:
    """Resolve a logical clip path or a file inside VIDEO/HVR.

    Raises:
        ClipNotFound: If the path is not a Sony HDV clip
    """
    path = Path(path).absolute()
    if path.is_file():
        hvr = path.parent
        video = hvr.parent
        return check_format(video.parent, video.name, hvr.name, path.name)
    if not path.parent.is_dir():
        raise ClipNotFound(f"Clip root folder does not exist: {path.parent}")
    return check_format(path.parent, "", "", path.name)


def make_index_file_path(root_path: Path | str, clip_name: str) -> Path:
    """Return the .IDX path for a clip.

    Uses <root>/VIDEO/HVR/<clip>.IDX when it exists, otherwise the first index
    file of the same clip family (renamed or spanned clips).

    Raises:
        ClipNotFound: If no index file can be found
    """
    folder = index_folder(root_path)
    if folder is None:
        raise ClipNotFound(f"No {VIDEO_FOLDER}/{HVR_FOLDER} folder under {root_path}")

    direct = folder / f"{clip_name}{INDEX_EXTENSION}"
    if direct.is_file():
        return direct

    found = scan_for_index(folder, clip_family_prefix(clip_name))
    if found is None:
        raise ClipNotFound(f"No index file for clip {clip_name!r} in {folder}")
    logger.debug("index_fallback", clip=clip_name, index=found.name)
    return found


def make_clip_file_path(context: ClipContext, suffix: str) -> Path:
    """Return <root>/VIDEO/HVR/<clip><suffix>, e.g. the .XMP sidecar path."""
    folder = index_folder(context.root_path)
    if folder is None:
        folder = context.root_path / VIDEO_FOLDER / HVR_FOLDER
    return folder / f"{context.clip_name}{suffix}"
