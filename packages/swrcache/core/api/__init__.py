"""Fetch collaborator types."""

from swrcache.core.api.envelope import SUCCESS_CODES, ApiResponse

__all__ = [
    "ApiResponse",
    "SUCCESS_CODES",
]
