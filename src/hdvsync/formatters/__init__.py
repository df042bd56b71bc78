"""Output formatters for hdvsync."""

from .default import format_index, format_sync
from .json import format_json, format_json_list, to_dict
from .quiet import format_quiet

__all__ = [
    "format_index",
    "format_sync",
    "format_json",
    "format_json_list",
    "format_quiet",
    "to_dict",
]
