"""Secret storage interface and in-memory implementation."""

import asyncio
from abc import ABC, abstractmethod
from typing import Optional


class SecretStore(ABC):
    """Interface for storing enrollment secrets per identity and service."""

    @abstractmethod
    async def put(
        self,
        identity_id: str,
        service_id: str,
        secret: bytes,
        pin: Optional[str] = None,
    ) -> None:
        """Store the secret for an identity at a service."""
        ...

    @abstractmethod
    async def get(
        self,
        identity_id: str,
        service_id: str,
        pin: Optional[str] = None,
    ) -> Optional[bytes]:
        """Retrieve the secret for an identity at a service, or None."""
        ...

    @abstractmethod
    async def has_secret(self, identity_id: str, service_id: str) -> bool:
        """Check if a secret exists for an identity at a service."""
        ...

    @abstractmethod
    async def delete(self, identity_id: str, service_id: str) -> None:
        """Delete the secret for an identity at a service."""
        ...

    @abstractmethod
    async def list_identities(self) -> list[tuple[str, str]]:
        """List all stored (identity_id, service_id) pairs."""
        ...


class InMemorySecretStore(SecretStore):
    """
    In-memory implementation of SecretStore (for testing).

    WARNING: This is NOT secure for production use. Secrets are stored in
    memory without encryption and the PIN is ignored.
    """

    def __init__(self) -> None:
        self._secrets: dict[tuple[str, str], bytes] = {}
        self._lock = asyncio.Lock()

    async def put(
        self,
        identity_id: str,
        service_id: str,
        secret: bytes,
        pin: Optional[str] = None,
    ) -> None:
        async with self._lock:
            self._secrets[(identity_id, service_id)] = bytes(secret)

    async def get(
        self,
        identity_id: str,
        service_id: str,
        pin: Optional[str] = None,
    ) -> Optional[bytes]:
        async with self._lock:
            return self._secrets.get((identity_id, service_id))

    async def has_secret(self, identity_id: str, service_id: str) -> bool:
        async with self._lock:
            return (identity_id, service_id) in self._secrets

    async def delete(self, identity_id: str, service_id: str) -> None:
        async with self._lock:
            self._secrets.pop((identity_id, service_id), None)

    async def list_identities(self) -> list[tuple[str, str]]:
        async with self._lock:
            return list(self._secrets.keys())
