"""Final cache key derivation with optional identity binding."""

from __future__ import annotations

from typing import Protocol

from .errors import IdentityUnavailable


class IdentityProvider(Protocol):
    """
    Protocol for resolving the current user identity.

    Implementations are expected to hold the identity in memory; the key
    deriver queries it on every call and performs no I/O of its own.
    """

    def get_identity(self) -> str | None:
        """Return the identity token, or None if not authenticated."""
        ...


class StaticIdentityProvider:
    """In-memory identity provider.

    Example:
        >>> provider = StaticIdentityProvider("1234567890")
        >>> provider.get_identity()
        '1234567890'
        >>> provider.set_identity(None)  # logout
    """

    def __init__(self, identity: str | None = None) -> None:
        self._identity = identity

    def get_identity(self) -> str | None:
        """Return the current identity token."""
        return self._identity

    def set_identity(self, identity: str | None) -> None:
        """Replace the identity (None logs out)."""
        self._identity = identity


class KeyDeriver:
    """Turns a logical key into the final storage key."""

    def __init__(self, identity_provider: IdentityProvider | None = None) -> None:
        self._identity_provider = identity_provider or StaticIdentityProvider()

    def derive(self, logical_key: str, bind_identity: bool = False) -> str:
        """
        Derive the final cache key.

        Args:
            logical_key: Caller-chosen key
            bind_identity: Prefix the key with the current identity token

        Returns:
            `logical_key` unchanged, or `"{identity}_{logical_key}"` when bound

        Raises:
            IdentityUnavailable: If binding is requested and no identity
                is authenticated
        """
        if not bind_identity:
            return logical_key

        try:
            identity = self._identity_provider.get_identity()
        except Exception as e:
            raise IdentityUnavailable("user not logged in", key=logical_key) from e

        if not identity:
            raise IdentityUnavailable("user not logged in", key=logical_key)

        return f"{identity}_{logical_key}"
