"""Exceptions raised by hdvsync."""


class HDVError(Exception):
    """Base class for all hdvsync errors."""

    pass


class ClipNotFound(HDVError):
    """No index file matches the requested clip.

    Expected and non-fatal: the path is not a Sony HDV clip, or the clip has
    no index on disk.
    """

    pass


class InvalidClipName(HDVError):
    """Clip name cannot carry a date/time suffix and is rejected before any I/O."""

    pass


class RecordNotFound(HDVError):
    """The index file has no file-info record for the clip's date/time."""

    pass


class IndexDecodeError(HDVError):
    """The index file could not be decoded."""

    pass


class TruncatedIndex(IndexDecodeError):
    """The index file ended before a complete header or record was read."""

    pass


class CorruptIndex(IndexDecodeError):
    """The index file contains bytes that violate the fixed layout."""

    pass


class OversizedSidecar(HDVError):
    """The existing XMP sidecar exceeds the configured sanity limit."""

    pass


class SidecarReadError(HDVError):
    """Opening or reading the existing XMP sidecar failed."""

    pass


class SidecarWriteError(HDVError):
    """Creating, writing or replacing the XMP sidecar failed."""

    pass


class XMPParseError(HDVError):
    """The XMP sidecar is not a well-formed XMP packet."""

    pass
