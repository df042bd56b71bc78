"""Quiet output formatter - one-line summary."""

from hdvsync.models import SyncResult


def format_quiet(result: SyncResult) -> str:
    """Format a sync result as one line.

    Format: clip | decision | N changed | written/unchanged
    """
    parts = [result.clip_name, result.decision or "n/a", f"{len(result.changed)} changed"]
    parts.append("written" if result.written else "not written")
    return " | ".join(parts)
