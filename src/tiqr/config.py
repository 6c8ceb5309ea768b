"""Configuration for Tiqr coordinators and storage."""

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from .types import SECRET_SIZE


@dataclass(frozen=True)
class TiqrConfig:
    """Configuration shared by the enrollment and authentication coordinators."""

    secret_size: int = SECRET_SIZE
    """Size in bytes of newly generated enrollment secrets."""

    submit_timeout: float = 30.0
    """Seconds to wait for the server to answer a submission."""

    language: str = "en"
    """Language reported to the server on enrollment."""

    notification_address: Optional[str] = None
    """Push notification address reported on enrollment."""

    secret_directory: Path = Path.home() / ".tiqr" / "secrets"
    """Directory used by FileSecretStore."""

    pbkdf2_iterations: int = 100_000
    """PBKDF2 iterations used to derive the file encryption key from the PIN."""

    @classmethod
    def default(cls) -> "TiqrConfig":
        """Creates the default configuration."""
        return cls()

    def with_timeout(self, seconds: float) -> "TiqrConfig":
        """Sets the submission timeout."""
        return replace(self, submit_timeout=seconds)

    def with_notification_address(self, address: str) -> "TiqrConfig":
        """Sets the push notification address."""
        return replace(self, notification_address=address)

    def with_secret_directory(self, directory: Path) -> "TiqrConfig":
        """Sets the secret storage directory."""
        return replace(self, secret_directory=Path(directory))
