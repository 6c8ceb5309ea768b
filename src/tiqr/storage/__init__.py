"""Tiqr secret storage module."""

from .secret_store import SecretStore, InMemorySecretStore
from .file_secret_store import FileSecretStore

__all__ = [
    "SecretStore",
    "InMemorySecretStore",
    "FileSecretStore",
]
