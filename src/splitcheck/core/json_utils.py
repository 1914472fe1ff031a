#!/usr/bin/env python3
"""
JSON Utilities Module

Centralized JSON reading and writing with consistent pretty-printing. The default
serializer understands the types that show up in settlement and analytics output
(enums, dates, and objects exposing to_dict()).
"""

import json
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any


def json_default(value: Any) -> Any:
    """
    Serialize values json.dump() does not handle natively.

    Raises:
        TypeError: For unsupported types (same contract as json.dump)
    """
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def format_json(data: Any, sort_keys: bool = False) -> str:
    """Format data as a pretty-printed JSON string."""
    return json.dumps(data, indent=2, ensure_ascii=False, sort_keys=sort_keys, default=json_default)


def write_json(filepath: str | Path, data: Any, sort_keys: bool = False) -> None:
    """
    Write data to a JSON file, creating parent directories as needed.

    Args:
        filepath: Path to the JSON file
        data: Data to write
        sort_keys: If True, sort dictionary keys (default: False)
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False, sort_keys=sort_keys, default=json_default)


def read_json(filepath: str | Path) -> Any:
    """Read data from a JSON file."""
    with open(filepath, encoding="utf-8") as f:
        return json.load(f)
