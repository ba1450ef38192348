"""Response envelope returned by fetch functions.

Wire format:
    {"code": 200, "message": "ok", "err_msg": null, "data": {...}}

`message` cannot carry variables, so messages with variables go to
`err_msg`.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

SUCCESS_CODES = frozenset({0, 200})


class ApiResponse(BaseModel):
    """
    Envelope of one API call.

    `content` is null whenever `code` is not a success code; `from_json`
    enforces this, so the cache never persists content of a failed call.
    """

    model_config = ConfigDict(frozen=True)

    code: int = Field(default=0, strict=True, description="Status code (0 or 200 means success)")
    message: str | None = Field(default=None, description="Human-readable status message")
    err_msg: str | None = Field(default=None, description="Message with interpolated variables")
    content: Any = Field(default=None, description="Payload (wire name: data)")

    @property
    def is_succeed(self) -> bool:
        """True for codes 0 and 200."""
        return self.code in SUCCESS_CODES

    @classmethod
    def empty(cls) -> ApiResponse:
        """Successful envelope without content."""
        return cls()

    @classmethod
    def from_json(
        cls,
        data: Mapping[str, Any],
        decode_content: Callable[[Any], Any] | None = None,
    ) -> ApiResponse:
        """
        Build an envelope from its decoded JSON object.

        Args:
            data: Wire mapping (not mutated)
            decode_content: Optional transform applied to non-null `data`

        Returns:
            ApiResponse with content nulled for non-success codes

        Raises:
            ValidationError: If `code` is present but not an integer

        Example:
            >>> ApiResponse.from_json({"code": 500, "message": "boom", "data": {"x": 1}}).content is None
            True
        """
        processed = dict(data)
        if processed.get("code") not in SUCCESS_CODES:
            processed["data"] = None

        code = processed.get("code")
        payload = processed.get("data")
        if payload is not None and decode_content is not None:
            payload = decode_content(payload)

        return cls(
            code=0 if code is None else code,
            message=processed.get("message"),
            err_msg=processed.get("err_msg"),
            content=payload,
        )

    @classmethod
    def from_json_string(
        cls,
        text: str | bytes,
        decode_content: Callable[[Any], Any] | None = None,
    ) -> ApiResponse:
        """Parse an envelope from JSON text.

        Raises:
            ValueError: If text is not a JSON object
        """
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError(f"Expected JSON object, got {type(data).__name__}")
        return cls.from_json(data, decode_content)

    def to_json(self, encode_content: Callable[[Any], Any] | None = None) -> dict[str, Any]:
        """
        Convert to the wire mapping.

        `message` and `err_msg` are omitted when null; `code` and `data`
        are always present.
        """
        result: dict[str, Any] = {}
        if self.message is not None:
            result["message"] = self.message
        if self.err_msg is not None:
            result["err_msg"] = self.err_msg
        result["code"] = self.code
        if self.content is not None and encode_content is not None:
            result["data"] = encode_content(self.content)
        else:
            result["data"] = self.content
        return result

    def to_json_string(self, encode_content: Callable[[Any], Any] | None = None) -> str:
        """Serialize to JSON text."""
        return json.dumps(self.to_json(encode_content), ensure_ascii=False)
