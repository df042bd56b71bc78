"""Default output formatter - human-readable clip report."""

from hdvsync.models import DecodedIndex, SyncResult, TechnicalMetadata


def _technical_lines(tech: TechnicalMetadata) -> list[str]:
    lines = []
    lines.append(f"  Definition:   {'SD' if tech.is_standard_definition else 'HD'}")
    if tech.resolution:
        lines.append(f"  Frame size:   {tech.resolution} {tech.frame_unit}")
        lines.append(f"  Pixel aspect: {tech.pixel_aspect_ratio}")
    if tech.frame_rate:
        lines.append(f"  Frame rate:   {tech.frame_rate.label}")
        lines.append(f"  Time scale:   {tech.duration_scale}")
        lines.append(f"  Duration:     {tech.total_frames} frames ({tech.duration_seconds:.2f}s)")
    else:
        lines.append(f"  Frame rate:   unknown (code {tech.frame_rate_code})")
        lines.append(f"  Duration:     {tech.total_frames} frames")
    if tech.start_timecode:
        lines.append(f"  Timecode:     {tech.start_timecode.formatted} ({tech.timecode_format})")
    if tech.creation_date:
        lines.append(f"  Created:      {tech.creation_date}")
    return lines


def format_index(clip_name: str, decoded: DecodedIndex) -> str:
    """Format a decoded index record as a report."""
    lines = []
    lines.append("=" * 70)
    lines.append(f"Clip: {clip_name}")
    lines.append("=" * 70)
    lines.append("")
    lines.append("## TECHNICAL")
    lines.extend(_technical_lines(decoded.technical))
    lines.append("")
    lines.append("## INDEX")
    lines.append(f"  Files:        {decoded.record.header.file_count}")
    lines.append(f"  Header:       {decoded.record.header_bytes.hex()}")
    lines.append(f"  Record:       {decoded.record.record_bytes.hex()}")
    return "\n".join(lines)


def format_sync(result: SyncResult) -> str:
    """Format a sync result as a report."""
    lines = []
    lines.append("=" * 70)
    lines.append(f"Clip: {result.clip_name}")
    lines.append("=" * 70)
    lines.append(f"  Sidecar:      {result.sidecar_path}")
    lines.append(f"  Decision:     {result.decision or 'n/a'}")
    if result.changed:
        lines.append(f"  Changed:      {', '.join(result.changed)}")
    else:
        lines.append("  Changed:      nothing")
    lines.append(f"  Written:      {'yes' if result.written else 'no'}")
    if result.technical:
        lines.append("")
        lines.append("## TECHNICAL")
        lines.extend(_technical_lines(result.technical))
    return "\n".join(lines)
