"""JSON output formatter."""

import json
from typing import Any

from pydantic import BaseModel

from hdvsync.models import BinaryIndexRecord


def to_dict(model: BaseModel) -> dict[str, Any]:
    """Convert a result model to a JSON-safe dictionary.

    Raw index bytes are rendered as hex strings.
    """
    record = getattr(model, "record", None)
    if not isinstance(record, BinaryIndexRecord):
        return model.model_dump(mode="json")

    data = model.model_dump(mode="json", exclude={"record"})
    data["record"] = {
        "header": record.header_bytes.hex(),
        "file_info": record.record_bytes.hex(),
        "file_count": record.header.file_count,
    }
    return data


def format_json(model: BaseModel, indent: int = 2) -> str:
    """Format a result model as a JSON string."""
    return json.dumps(to_dict(model), indent=indent, ensure_ascii=False, default=str)


def format_json_list(models: list[BaseModel], indent: int = 2) -> str:
    """Format multiple result models as a JSON array."""
    data = [to_dict(m) for m in models]
    return json.dumps(data, indent=indent, ensure_ascii=False, default=str)
