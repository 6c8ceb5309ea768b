"""
File-based secret storage protected by the user's PIN.

Stores enrollment secrets encrypted with AES-256-GCM, using a key derived
from the PIN via PBKDF2. Secrets are stored in `~/.tiqr/secrets/` unless
another directory is configured.

## Storage Format

Each secret file contains:
- Salt: 32 bytes (random, for PBKDF2)
- Nonce: 12 bytes (random, for AES-GCM)
- Ciphertext: variable (encrypted secret)
- Tag: 16 bytes (authentication tag)

The identity and service identifiers are bound to the ciphertext as
associated data, so a file renamed to another identity fails to open.

## Security

- Uses PBKDF2-SHA256 with 100,000 iterations for key derivation
- Uses AES-256-GCM for authenticated encryption
- Files are stored with 600 permissions (owner read/write only)
- Salt is unique per secret file
"""

import base64
import os
from pathlib import Path
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ..config import TiqrConfig
from ..types import InvalidPinError, PinRequiredError, StorageError
from .secret_store import SecretStore


class FileSecretStore(SecretStore):
    """
    File-based secret storage with PIN protection.

    Example usage:
        ```python
        store = FileSecretStore()

        # Store a secret
        await store.put("john", "tiqr.example.org", secret, pin="1234")

        # Retrieve
        secret = await store.get("john", "tiqr.example.org", pin="1234")
        ```
    """

    # Salt size in bytes
    SALT_SIZE = 32

    # AES-GCM nonce size in bytes
    NONCE_SIZE = 12

    # AES-GCM tag size in bytes
    TAG_SIZE = 16

    # Minimum file size (salt + nonce + tag)
    MIN_FILE_SIZE = 32 + 12 + 16

    FILE_SUFFIX = ".secret"

    def __init__(
        self,
        directory: Optional[Path] = None,
        iterations: Optional[int] = None,
    ) -> None:
        """
        Create a new file secret store.

        Args:
            directory: Where secret files live (default: `TiqrConfig.secret_directory`).
            iterations: PBKDF2 iteration count (default: `TiqrConfig.pbkdf2_iterations`).
        """
        defaults = TiqrConfig.default()
        self._directory = Path(directory) if directory is not None else defaults.secret_directory
        self._iterations = iterations or defaults.pbkdf2_iterations

    @classmethod
    def from_config(cls, config: TiqrConfig) -> "FileSecretStore":
        return cls(directory=config.secret_directory, iterations=config.pbkdf2_iterations)

    async def put(
        self,
        identity_id: str,
        service_id: str,
        secret: bytes,
        pin: Optional[str] = None,
    ) -> None:
        """
        Store a secret for an identity at a service.

        Raises:
            PinRequiredError: If no PIN is given.
        """
        if not pin:
            raise PinRequiredError()

        directory = self._ensure_directory()

        salt = os.urandom(self.SALT_SIZE)
        nonce = os.urandom(self.NONCE_SIZE)

        derived_key = self._derive_key(pin, salt)

        aesgcm = AESGCM(derived_key)
        ciphertext_and_tag = aesgcm.encrypt(
            nonce, bytes(secret), self._associated_data(identity_id, service_id)
        )

        file_path = self._secret_file_path(identity_id, service_id, directory)
        file_path.write_bytes(salt + nonce + ciphertext_and_tag)

        self._set_restrictive_permissions(file_path)

    async def get(
        self,
        identity_id: str,
        service_id: str,
        pin: Optional[str] = None,
    ) -> Optional[bytes]:
        """
        Retrieve the secret for an identity at a service.

        Returns:
            The secret, or None if nothing is stored.

        Raises:
            PinRequiredError: If no PIN is given.
            InvalidPinError: If the PIN does not unlock the secret.
            StorageError: If the file is truncated.
        """
        if not pin:
            raise PinRequiredError()

        file_path = self._secret_file_path(identity_id, service_id, self._directory)
        if not file_path.exists():
            return None

        file_data = file_path.read_bytes()

        if len(file_data) < self.MIN_FILE_SIZE:
            raise StorageError(f"Secret file is corrupted: {file_path.name}")

        salt = file_data[: self.SALT_SIZE]
        nonce = file_data[self.SALT_SIZE : self.SALT_SIZE + self.NONCE_SIZE]
        ciphertext_and_tag = file_data[self.SALT_SIZE + self.NONCE_SIZE :]

        derived_key = self._derive_key(pin, salt)

        try:
            aesgcm = AESGCM(derived_key)
            return aesgcm.decrypt(
                nonce, ciphertext_and_tag, self._associated_data(identity_id, service_id)
            )
        except InvalidTag as e:
            raise InvalidPinError() from e

    async def has_secret(self, identity_id: str, service_id: str) -> bool:
        return self._secret_file_path(identity_id, service_id, self._directory).exists()

    async def delete(self, identity_id: str, service_id: str) -> None:
        file_path = self._secret_file_path(identity_id, service_id, self._directory)
        if file_path.exists():
            file_path.unlink()

    async def list_identities(self) -> list[tuple[str, str]]:
        if not self._directory.exists():
            return []

        result = []
        for f in self._directory.iterdir():
            if f.suffix != self.FILE_SUFFIX:
                continue
            service_part, _, identity_part = f.stem.partition(".")
            result.append((_decode_name(identity_part), _decode_name(service_part)))
        return result

    def _ensure_directory(self) -> Path:
        """Ensure the secret storage directory exists."""
        self._directory.mkdir(parents=True, exist_ok=True)
        try:
            self._directory.chmod(0o700)
        except OSError:
            pass  # Ignore permission errors on some platforms
        return self._directory

    def _secret_file_path(self, identity_id: str, service_id: str, directory: Path) -> Path:
        name = f"{_encode_name(service_id)}.{_encode_name(identity_id)}"
        return directory / f"{name}{self.FILE_SUFFIX}"

    def _associated_data(self, identity_id: str, service_id: str) -> bytes:
        return service_id.encode("utf-8") + b"\x00" + identity_id.encode("utf-8")

    def _derive_key(self, pin: str, salt: bytes) -> bytes:
        """Derive an encryption key from the PIN using PBKDF2."""
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt,
            iterations=self._iterations,
        )
        return kdf.derive(pin.encode("utf-8"))

    def _set_restrictive_permissions(self, file_path: Path) -> None:
        """Set restrictive file permissions (600 on Unix)."""
        try:
            file_path.chmod(0o600)
        except OSError:
            pass  # Ignore permission errors on some platforms


def _encode_name(value: str) -> str:
    return base64.urlsafe_b64encode(value.encode("utf-8")).rstrip(b"=").decode("ascii")


def _decode_name(value: str) -> str:
    padding = 4 - len(value) % 4
    if padding != 4:
        value += "=" * padding
    return base64.urlsafe_b64decode(value).decode("utf-8")
