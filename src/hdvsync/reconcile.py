"""Apply decoded technical metadata to an XMP container.

Each tracked property is written only when a digest was stored before (the
sidecar was machine-synced and the index has since changed, so the index
wins) or when the property does not exist yet. A sidecar that was never
synced therefore only has its gaps filled, and hand-authored values survive.
"""

from __future__ import annotations

from hdvsync.log import get_logger
from hdvsync.models import TechnicalMetadata
from hdvsync.xmp import NS_DIM, NS_DM, NS_XMP, XMPMeta

logger = get_logger(component="reconcile")

# Tracked properties: (namespace, name)
FRAME_SIZE = (NS_DM, "videoFrameSize")
PIXEL_ASPECT_RATIO = (NS_DM, "videoPixelAspectRatio")
START_TIME_SCALE = (NS_DM, "startTimeScale")
START_TIME_SAMPLE_SIZE = (NS_DM, "startTimeSampleSize")
DURATION = (NS_DM, "duration")
START_TIMECODE = (NS_DM, "startTimecode")
CREATE_DATE = (NS_XMP, "CreateDate")
FRAME_RATE = (NS_DM, "videoFrameRate")

TRACKED_PROPERTIES = (
    FRAME_SIZE,
    PIXEL_ASPECT_RATIO,
    START_TIME_SCALE,
    START_TIME_SAMPLE_SIZE,
    DURATION,
    START_TIMECODE,
    CREATE_DATE,
    FRAME_RATE,
)


class MetadataReconciler:
    """Writes TechnicalMetadata into an XMPMeta under the staleness policy."""

    def __init__(self, meta: XMPMeta, prior_digest_present: bool) -> None:
        self.meta = meta
        self.prior_digest_present = prior_digest_present
        self.changed: list[str] = []

    def may_write(self, prop: tuple[str, str]) -> bool:
        """Return True if the policy allows overwriting prop."""
        ns, name = prop
        return self.prior_digest_present or not self.meta.does_property_exist(ns, name)

    def apply(self, technical: TechnicalMetadata) -> list[str]:
        """Apply all tracked properties and return the names that changed."""
        self._apply_frame_size(technical)
        self._apply_pixel_aspect_ratio(technical)
        self._apply_time_scale(technical)
        self._apply_timecode(technical)
        self._apply_create_date(technical)
        self._apply_frame_rate(technical)
        return self.changed

    # Frame size and pixel aspect ratio are only known for HD.

    def _apply_frame_size(self, technical: TechnicalMetadata) -> None:
        if technical.is_standard_definition or not self.may_write(FRAME_SIZE):
            return
        ns, name = FRAME_SIZE
        fields = (
            ("w", str(technical.frame_width)),
            ("h", str(technical.frame_height)),
            ("unit", technical.frame_unit or ""),
        )
        for field, value in fields:
            if self.meta.get_struct_field(ns, name, NS_DIM, field) != value:
                self.meta.set_struct_field(ns, name, NS_DIM, field, value)
                self._mark(name)

    def _apply_pixel_aspect_ratio(self, technical: TechnicalMetadata) -> None:
        if technical.is_standard_definition or technical.pixel_aspect_ratio is None:
            return
        if self.may_write(PIXEL_ASPECT_RATIO):
            self._set_property(PIXEL_ASPECT_RATIO, technical.pixel_aspect_ratio)

    def _apply_time_scale(self, technical: TechnicalMetadata) -> None:
        rate = technical.frame_rate
        if rate is None:
            return

        if self.may_write(START_TIME_SCALE):
            self._set_property(START_TIME_SCALE, str(rate.sample_scale))

        if self.may_write(START_TIME_SAMPLE_SIZE):
            self._set_property(START_TIME_SAMPLE_SIZE, str(rate.sample_size))

        if self.may_write(DURATION):
            ns, name = DURATION
            self._set_field(ns, name, NS_DM, "value", str(technical.total_frames))
            self._set_field(ns, name, NS_DM, "scale", technical.duration_scale or "")

    def _apply_timecode(self, technical: TechnicalMetadata) -> None:
        if not self.may_write(START_TIMECODE):
            return
        timecode = technical.start_timecode
        if timecode is None or technical.timecode_format is None:
            return

        ns, name = START_TIMECODE
        stored = (
            self.meta.get_struct_field(ns, name, NS_DM, "timeValue"),
            self.meta.get_struct_field(ns, name, NS_DM, "timeFormat"),
        )
        if stored != (timecode.formatted, technical.timecode_format):
            self._set_field(ns, name, NS_DM, "timeValue", timecode.formatted)
            self._set_field(ns, name, NS_DM, "timeFormat", technical.timecode_format)

    def _apply_create_date(self, technical: TechnicalMetadata) -> None:
        if technical.creation_date is None:
            return
        if self.may_write(CREATE_DATE):
            self._set_property(CREATE_DATE, technical.creation_date)

    def _apply_frame_rate(self, technical: TechnicalMetadata) -> None:
        label = technical.frame_rate_label
        if not label:
            return
        if self.may_write(FRAME_RATE):
            self._set_property(FRAME_RATE, label)

    def _set_property(self, prop: tuple[str, str], value: str) -> None:
        ns, name = prop
        if self.meta.get_property(ns, name) == value:
            return
        self.meta.set_property(ns, name, value, delete_existing=True)
        self._mark(name)

    def _set_field(self, ns: str, name: str, field_ns: str, field: str, value: str) -> None:
        if self.meta.get_struct_field(ns, name, field_ns, field) == value:
            return
        self.meta.set_struct_field(ns, name, field_ns, field, value)
        self._mark(name)

    def _mark(self, name: str) -> None:
        if name not in self.changed:
            self.changed.append(name)


def reconcile(
    meta: XMPMeta, technical: TechnicalMetadata, prior_digest_present: bool
) -> list[str]:
    """Write technical metadata into meta under the staleness policy.

    Args:
        meta: Container to update in place
        technical: Decoded technical metadata
        prior_digest_present: Whether the container held a stored digest,
            whether or not it matched

    Returns:
        Names of the properties that were changed
    """
    changed = MetadataReconciler(meta, prior_digest_present).apply(technical)
    logger.debug("reconciled", prior_digest=prior_digest_present, changed=changed)
    return changed
