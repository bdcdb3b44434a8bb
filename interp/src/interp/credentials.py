"""Credential stores - named secrets scoped to an agent.

Implementations:
- InMemoryCredentialStore: dict-backed, for embedding and tests
- NoCredentialStore: agent has no credentials at all
"""

from abc import ABC, abstractmethod


class CredentialStore(ABC):
    """Abstract interface for credential lookup."""

    @abstractmethod
    def lookup_credential(self, owner_id: str, name: str) -> str | None:
        """Return the credential value, or None if the owner has none by that name."""
        ...


class InMemoryCredentialStore(CredentialStore):
    """Credentials held in a dict keyed by (owner id, name)."""

    def __init__(self, credentials: dict[str, dict[str, str]] | None = None):
        self._credentials: dict[tuple[str, str], str] = {}
        for owner_id, named in (credentials or {}).items():
            for name, value in named.items():
                self.add(owner_id, name, value)

    def add(self, owner_id: str, name: str, value: str) -> None:
        self._credentials[(owner_id, name)] = value

    def remove(self, owner_id: str, name: str) -> None:
        self._credentials.pop((owner_id, name), None)

    def lookup_credential(self, owner_id: str, name: str) -> str | None:
        return self._credentials.get((owner_id, name))


class NoCredentialStore(CredentialStore):
    """Store with no credentials; every lookup misses."""

    def lookup_credential(self, owner_id: str, name: str) -> str | None:
        return None


__all__ = [
    "CredentialStore",
    "InMemoryCredentialStore",
    "NoCredentialStore",
]
