"""OCRA message assembly."""

import string
from dataclasses import dataclass
from typing import Optional

from .suite import SuiteDescriptor
from .types import SUITE_DELIMITER, InvalidInputError

_HEX_DIGITS = frozenset(string.hexdigits)


@dataclass(frozen=True)
class ChallengeInput:
    """Raw, unpadded hex values for the OCRA data input fields.

    Fields the suite does not declare are ignored.
    """
    question: str = ""
    counter: Optional[str] = None
    password: Optional[str] = None
    session_info: Optional[str] = None
    timestamp: Optional[str] = None


def pad_left(value: str, hex_length: int) -> str:
    """Left-pad a hex value with '0' to `hex_length` characters."""
    _check_hex(value, hex_length)
    return value.rjust(hex_length, "0")


def pad_right(value: str, hex_length: int) -> str:
    """Right-pad a hex value with '0' to `hex_length` characters."""
    _check_hex(value, hex_length)
    return value.ljust(hex_length, "0")


def hex_to_bytes(value: str, length: int) -> bytes:
    """
    Convert a hex string to exactly `length` bytes.

    Shorter values are left-padded, so leading zero nibbles are never lost.

    Raises:
        InvalidInputError: If the value is not hex or does not fit
    """
    return bytes.fromhex(pad_left(value, length * 2))


def build_message(descriptor: SuiteDescriptor, challenge_input: ChallengeInput) -> bytearray:
    """
    Assemble the message that is signed with the shared secret.

    Format:
        [suite]            suite string bytes
        [1]                0x00 delimiter
        [8]                counter (if C)
        [128]              question, right-padded (if Q)
        [20|32|64]         password hash (if PSHA*)
        [64|128|256|512]   session information (if S*)
        [8]                timestamp (if T)

    Args:
        descriptor: Parsed suite
        challenge_input: Raw field values

    Returns:
        The message as a mutable buffer the caller can wipe after use

    Raises:
        InvalidInputError: If a field is not hex or too long for its slot
    """
    message = bytearray(descriptor.message_length)

    suite_bytes = descriptor.suite_bytes
    message[: len(suite_bytes)] = suite_bytes
    offset = len(suite_bytes)
    message[offset : offset + len(SUITE_DELIMITER)] = SUITE_DELIMITER
    offset += len(SUITE_DELIMITER)

    fields = (
        (descriptor.counter_length, challenge_input.counter, pad_left, "counter"),
        (descriptor.question_length, challenge_input.question, pad_right, "question"),
        (descriptor.password_length, challenge_input.password, pad_left, "password"),
        (descriptor.session_info_length, challenge_input.session_info, pad_left, "session info"),
        (descriptor.timestamp_length, challenge_input.timestamp, pad_left, "timestamp"),
    )

    for length, value, pad, name in fields:
        if length == 0:
            continue
        try:
            padded = pad(value or "", length * 2)
        except InvalidInputError as e:
            raise InvalidInputError(f"Invalid {name}: {e}") from e
        message[offset : offset + length] = bytes.fromhex(padded)
        offset += length

    return message


def _check_hex(value: str, hex_length: int) -> None:
    if len(value) > hex_length:
        raise InvalidInputError(
            f"{len(value)} hex characters exceed the field size of {hex_length}"
        )
    if not _HEX_DIGITS.issuperset(value):
        raise InvalidInputError("value is not hexadecimal")
