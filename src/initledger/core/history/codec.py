# Copyright (c) 2026 Yusoku Advisor Godo Kaisha (ゆうそくアドバイザー合同会社)
# Released under the MIT license
# https://opensource.org/licenses/MIT

"""
JSON codec for instance history files.

Files are compact UTF-8 JSON objects:

    {"instanceID": "i-0abc", "runTime": "2026-10-18T09:12:01.250000Z",
     "moduleHistories": [{"key": "net-v1", "success": true}], "version": 1}

The decoder is lenient: missing fields fall back to empty values, unknown
fields are ignored, and the older ``moduleHistory`` field name is accepted.
"""

import json
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from .errors import HistoryDecodeError
from .types import History, HistoryPayload, ModuleHistory

# RFC 3339 with an optional fraction of any length and an optional offset
_TIMESTAMP_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})?$"
)

_MODULE_FIELDS = ("moduleHistories", "moduleHistory")


def format_timestamp(value: datetime) -> str:
    """Render a datetime as RFC 3339 in UTC with a ``Z`` suffix. Naive values are local time."""
    text = value.astimezone(timezone.utc).isoformat()
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text


def parse_timestamp(text: str) -> datetime:
    """
    Parse an RFC 3339 timestamp.

    Fractions longer than microseconds (e.g. nanosecond timestamps) are
    truncated.
    """
    match = _TIMESTAMP_RE.match(text.strip())
    if not match:
        raise ValueError(f"not an RFC 3339 timestamp: {text!r}")

    normalized = match.group("base").replace(" ", "T")
    fraction = match.group("fraction")
    if fraction:
        normalized += "." + fraction[:6].ljust(6, "0")
    offset = match.group("offset")
    if offset:
        normalized += "+00:00" if offset in ("Z", "z") else offset
    return datetime.fromisoformat(normalized)


def history_to_payload(history: History) -> HistoryPayload:
    return {
        "instanceID": history.instance_id,
        "runTime": format_timestamp(history.run_time or datetime.now(timezone.utc)),
        "moduleHistories": [
            {"key": entry.key, "success": entry.success}
            for entry in history.module_histories
        ],
        "version": history.version,
    }


def encode_history(history: History) -> bytes:
    """Serialize a History to compact UTF-8 JSON bytes."""
    payload = history_to_payload(history)
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def _decode_module_entries(raw: Any) -> List[ModuleHistory]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise HistoryDecodeError(f"module history must be a list, got {type(raw).__name__}")

    entries = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise HistoryDecodeError(f"module history entry {index} must be an object")
        key = item.get("key", "")
        success = item.get("success", False)
        if not isinstance(key, str):
            raise HistoryDecodeError(f"module history entry {index}: 'key' must be a string")
        if not isinstance(success, bool):
            raise HistoryDecodeError(f"module history entry {index}: 'success' must be a boolean")
        entries.append(ModuleHistory(key=key, success=success))
    return entries


def payload_to_history(payload: Dict[str, Any]) -> History:
    instance_id = payload.get("instanceID", "")
    if not isinstance(instance_id, str):
        raise HistoryDecodeError("'instanceID' must be a string")

    run_time: Optional[datetime] = None
    raw_time = payload.get("runTime")
    if raw_time is not None:
        if not isinstance(raw_time, str):
            raise HistoryDecodeError("'runTime' must be a string")
        try:
            run_time = parse_timestamp(raw_time)
        except ValueError as e:
            raise HistoryDecodeError(f"invalid 'runTime': {e}") from e

    raw_modules = None
    for name in _MODULE_FIELDS:
        if name in payload:
            raw_modules = payload[name]
            break

    # Future versions are accepted as-is
    version = payload.get("version", 0)
    if isinstance(version, bool) or not isinstance(version, int):
        raise HistoryDecodeError("'version' must be an integer")

    return History(
        instance_id=instance_id,
        run_time=run_time,
        module_histories=_decode_module_entries(raw_modules),
        version=version,
    )


def decode_history(data: Union[bytes, str]) -> History:
    """
    Deserialize a history document.

    Raises:
        HistoryDecodeError: If the data is not JSON or not a history object.
    """
    try:
        payload = json.loads(data)
    except ValueError as e:
        raise HistoryDecodeError(f"malformed history JSON: {e}") from e

    if not isinstance(payload, dict):
        raise HistoryDecodeError(f"history must be a JSON object, got {type(payload).__name__}")
    return payload_to_history(payload)
