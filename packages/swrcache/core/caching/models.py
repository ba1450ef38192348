"""Models for the request cache.

Provides the persisted record, delivery event, and per-call outcome.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, JsonValue

T = TypeVar("T")


class CachedRecord(BaseModel):
    """
    Persisted unit of (timestamp, content) for one final cache key.

    Always written as a whole; the stored bytes are the JSON object
    `{"timestamp": <epoch millis>, "content": <JSON tree or null>}`.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    timestamp: int = Field(strict=True, description="Write time in epoch milliseconds")
    content: JsonValue = Field(description="Content tree as returned by the fetch")


@dataclass(frozen=True)
class CacheEvent(Generic[T]):
    """One success delivery of a cache request.

    Attributes:
        data: Decoded domain object
        from_cache: True when served from the persisted record
    """

    data: T
    from_cache: bool


class CacheOutcome(str, Enum):
    """Terminal state of one `request()` call."""

    DELIVERED = "delivered"  # one or two success deliveries
    SUPPRESSED = "suppressed"  # cached delivery only, fresh result was identical
    ERRORED = "errored"  # exactly one error delivery
