"""Enrollment and authentication URL handling."""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import unquote, urlparse

from .types import AUTHENTICATION_SCHEME, ENROLLMENT_SCHEME, InvalidUrlError


@dataclass(frozen=True)
class ChallengeUrl:
    """Parsed authentication URL."""
    service_id: str
    session_key: str
    challenge: str
    identity_id: Optional[str] = None
    service_provider: str = ""
    protocol_version: Optional[str] = None


def parse_enrollment_url(url: str) -> str:
    """Parse an enrollment URL.

    Format: tiqrenroll://<metadata URL>

    A plain http(s) metadata URL is accepted as is.

    Args:
        url: The scanned enrollment URL.

    Returns:
        The metadata URL.

    Raises:
        InvalidUrlError: If the URL is not an enrollment URL.
    """
    prefix = f"{ENROLLMENT_SCHEME}://"
    metadata_url = url[len(prefix):] if url.startswith(prefix) else url

    parsed = urlparse(metadata_url)
    if parsed.scheme not in ("http", "https"):
        raise InvalidUrlError(f"Invalid metadata URL scheme: {parsed.scheme!r}")

    if not parsed.netloc:
        raise InvalidUrlError("Missing metadata host")

    return metadata_url


def parse_authentication_url(url: str) -> ChallengeUrl:
    """Parse an authentication URL.

    Format: tiqrauth://[identity@]service/session_key/challenge[/sp[/version]]

    Args:
        url: The scanned or pushed authentication URL.

    Returns:
        The parsed ChallengeUrl.

    Raises:
        InvalidUrlError: If the URL is invalid.
    """
    parsed = urlparse(url)

    if parsed.scheme != AUTHENTICATION_SCHEME:
        raise InvalidUrlError(f"Invalid scheme: {parsed.scheme}")

    identity_part, _, service_id = parsed.netloc.rpartition("@")
    if not service_id:
        raise InvalidUrlError("Missing service identifier")

    parts = [unquote(p) for p in parsed.path.split("/")[1:]]
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise InvalidUrlError("Missing session key or challenge")

    return ChallengeUrl(
        service_id=unquote(service_id),
        session_key=parts[0],
        challenge=parts[1],
        identity_id=unquote(identity_part) if identity_part else None,
        service_provider=parts[2] if len(parts) > 2 else "",
        protocol_version=parts[3] if len(parts) > 3 and parts[3] else None,
    )
