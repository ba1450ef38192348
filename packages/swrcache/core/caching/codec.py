"""Record codec: CachedRecord <-> stored bytes."""

from __future__ import annotations

import json
import time
from typing import Any

from pydantic import ValidationError

from .errors import CorruptRecord, EncodeError
from .models import CachedRecord


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def make_record(content: Any, timestamp: int | None = None) -> CachedRecord:
    """
    Build a record for freshly fetched content.

    Args:
        content: Content tree from a successful response
        timestamp: Write time in epoch milliseconds (defaults to now)

    Returns:
        CachedRecord stamped with the write time

    Raises:
        EncodeError: If content is not a JSON tree
    """
    try:
        return CachedRecord(
            timestamp=now_ms() if timestamp is None else timestamp,
            content=content,
        )
    except ValidationError as e:
        raise EncodeError(f"Content is not a JSON tree: {e.error_count()} validation error(s)") from e


def encode_record(record: CachedRecord) -> bytes:
    """
    Serialize a record to its stored byte form.

    Raises:
        EncodeError: If the content cannot be represented as JSON
    """
    payload = {"timestamp": record.timestamp, "content": record.content}
    try:
        text = json.dumps(payload, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError, RecursionError) as e:
        raise EncodeError(f"Failed to serialize record content: {e}") from e
    return text.encode("utf-8")


def decode_record(data: bytes) -> CachedRecord:
    """
    Parse stored bytes into a record.

    Raises:
        CorruptRecord: On empty or malformed bytes, a non-object payload,
            or missing/invalid fields
    """
    if not data:
        raise CorruptRecord("Record is empty")

    try:
        return CachedRecord.model_validate_json(data)
    except ValidationError as e:
        raise CorruptRecord(f"Malformed record: {e.error_count()} validation error(s)") from e
    except ValueError as e:
        raise CorruptRecord(f"Malformed record: {e}") from e
