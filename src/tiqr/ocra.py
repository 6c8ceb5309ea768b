"""OCRA (RFC 6287) response computation.

The reference algorithm is followed with one compatibility extension: a
bare ``S`` data input (no length suffix) means 64 bytes of session
information.
"""

import os

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, hmac

from .message import ChallengeInput, build_message, pad_left
from .suite import HashAlgorithm, parse_suite
from .types import (
    DIGITS_POWER,
    SECRET_SIZE,
    CryptoUnavailableError,
    InvalidInputError,
)


def hmac_digest(algorithm: HashAlgorithm, key: bytes, message: bytes) -> bytes:
    """
    Compute HMAC over a message.

    Raises:
        CryptoUnavailableError: If the backend does not provide the hash
    """
    try:
        mac = hmac.HMAC(key, algorithm.hash_type())
    except UnsupportedAlgorithm as e:
        raise CryptoUnavailableError(f"HMAC-{algorithm.name} is not available") from e
    mac.update(message)
    return mac.finalize()


def truncate(digest: bytes, digits: int) -> str:
    """
    Dynamic truncation of an HMAC value to a decimal code.

    Args:
        digest: Raw HMAC output
        digits: Number of code digits (0..8)

    Returns:
        The code, left-padded with '0' to `digits` characters
    """
    offset = digest[-1] & 0x0F

    binary = (digest[offset] & 0x7F) << 24
    binary |= (digest[offset + 1] & 0xFF) << 16
    binary |= (digest[offset + 2] & 0xFF) << 8
    binary |= digest[offset + 3] & 0xFF

    otp = binary % DIGITS_POWER[digits]
    return str(otp).rjust(digits, "0")


def decode_secret(secret: str) -> bytearray:
    """Decode a hex secret; odd-length secrets gain one leading zero nibble."""
    if not secret:
        raise InvalidInputError("Secret is empty")
    hex_length = len(secret) + len(secret) % 2
    try:
        return bytearray.fromhex(pad_left(secret, hex_length))
    except InvalidInputError as e:
        raise InvalidInputError(f"Invalid secret: {e}") from e


def compute_response(suite: str, secret: str, challenge_input: ChallengeInput) -> str:
    """
    Compute the OCRA response for a challenge.

    Pure and stateless; safe to call concurrently. The decoded key and the
    assembled message are wiped before returning, on success and on error.

    Args:
        suite: OCRA suite string, e.g. ``OCRA-1:HOTP-SHA1-6:QN08``
        secret: Shared secret, hex encoded
        challenge_input: Raw hex values for the data input fields

    Returns:
        The response code, exactly `code_digits` decimal characters

    Raises:
        InvalidSuiteError: If the suite cannot be parsed
        InvalidInputError: If the secret or a field is malformed
        CryptoUnavailableError: If the hash is not available
    """
    descriptor = parse_suite(suite)

    key = bytearray()
    try:
        key = decode_secret(secret)
        return compute_response_with_key(descriptor.suite, key, challenge_input)
    finally:
        _wipe(key)


def compute_response_with_key(suite: str, key: bytearray, challenge_input: ChallengeInput) -> str:
    """
    Compute the OCRA response with an already decoded key.

    The key buffer stays owned by the caller, who wipes it. The assembled
    message is wiped before returning.

    Raises:
        InvalidSuiteError: If the suite cannot be parsed
        InvalidInputError: If the key is empty or a field is malformed
        CryptoUnavailableError: If the hash is not available
    """
    descriptor = parse_suite(suite)
    if not key:
        raise InvalidInputError("Secret is empty")

    message = bytearray()
    try:
        message = build_message(descriptor, challenge_input)
        digest = hmac_digest(descriptor.hash_algorithm, key, message)
    finally:
        _wipe(message)

    return truncate(digest, descriptor.code_digits)


def hash_password(password: str, algorithm: HashAlgorithm) -> str:
    """Hash a password for the PSHA1/PSHA256/PSHA512 data input, hex encoded."""
    digest = hashes.Hash(algorithm.hash_type())
    digest.update(password.encode("utf-8"))
    return digest.finalize().hex()


def generate_secret(size: int = SECRET_SIZE) -> bytes:
    """Generate a random shared secret for a new enrollment."""
    if size < 20:
        raise ValueError(f"Secret must be at least 20 bytes, got {size}")
    return os.urandom(size)


def _wipe(buffer: bytearray) -> None:
    buffer[:] = bytes(len(buffer))
