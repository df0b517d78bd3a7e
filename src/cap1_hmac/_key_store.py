"""Secret resolver interface and an in-memory implementation."""

from __future__ import annotations

from collections.abc import Awaitable, Mapping
from typing import Protocol, runtime_checkable


@runtime_checkable
class SecretResolver(Protocol):
    """Look up the shared secret for a keyId.

    Return ``None`` (or an empty secret) for an unknown keyId; raising signals that
    the lookup itself failed. Both outcomes make verification fail.
    """

    def __call__(self, key_id: str) -> Awaitable[str | bytes | None]: ...


class MemoryKeyStore:
    """Secret resolver backed by a dict of ``keyId -> secret``."""

    def __init__(self, secrets: Mapping[str, str | bytes] | None = None) -> None:
        self._secrets: dict[str, str | bytes] = dict(secrets or {})

    def put_secret(self, key_id: str, secret: str | bytes) -> None:
        self._secrets[key_id] = secret

    def delete_secret(self, key_id: str) -> bool:
        return self._secrets.pop(key_id, None) is not None

    def clear(self) -> None:
        """Remove all secrets."""
        self._secrets.clear()

    async def __call__(self, key_id: str) -> str | bytes | None:
        return self._secrets.get(key_id)
