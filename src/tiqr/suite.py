"""OCRA suite string parsing.

An OCRA suite has the form ``<Version>:<CryptoFunction>:<DataInput>``, for
example ``OCRA-1:HOTP-SHA1-6:QN08``. This module is the only place that
knows the suite grammar; everything downstream works on a SuiteDescriptor.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from cryptography.hazmat.primitives import hashes

from .types import (
    BARE_SESSION_INFO_SIZE,
    COUNTER_SIZE,
    MAX_CODE_DIGITS,
    PASSWORD_SIZES,
    QUESTION_SIZE,
    SESSION_INFO_SIZES,
    SUITE_DELIMITER,
    TIMESTAMP_SIZE,
    InvalidSuiteError,
)


class HashAlgorithm(Enum):
    """HMAC hash function selected by the CryptoFunction segment."""
    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA512 = "sha512"

    def hash_type(self) -> hashes.HashAlgorithm:
        """Returns a fresh `cryptography` hash instance for this algorithm."""
        if self is HashAlgorithm.SHA1:
            return hashes.SHA1()
        if self is HashAlgorithm.SHA256:
            return hashes.SHA256()
        return hashes.SHA512()


_PASSWORD_ALGORITHMS = {
    PASSWORD_SIZES["psha1"]: HashAlgorithm.SHA1,
    PASSWORD_SIZES["psha256"]: HashAlgorithm.SHA256,
    PASSWORD_SIZES["psha512"]: HashAlgorithm.SHA512,
}


@dataclass(frozen=True)
class SuiteDescriptor:
    """Parsed OCRA suite.

    Byte lengths are 0 when the field is absent from the suite.
    """

    suite: str
    version: str
    hash_algorithm: HashAlgorithm
    code_digits: int
    has_counter: bool = False
    question_length: int = 0
    password_length: int = 0
    session_info_length: int = 0
    has_timestamp: bool = False

    @property
    def counter_length(self) -> int:
        return COUNTER_SIZE if self.has_counter else 0

    @property
    def timestamp_length(self) -> int:
        return TIMESTAMP_SIZE if self.has_timestamp else 0

    @property
    def password_algorithm(self) -> Optional[HashAlgorithm]:
        """Hash applied to the password, or None if the suite has no password."""
        return _PASSWORD_ALGORITHMS.get(self.password_length)

    @property
    def suite_bytes(self) -> bytes:
        return self.suite.encode("utf-8")

    @property
    def message_length(self) -> int:
        """Total size of the message to be signed."""
        return (
            len(self.suite_bytes)
            + len(SUITE_DELIMITER)
            + self.counter_length
            + self.question_length
            + self.password_length
            + self.session_info_length
            + self.timestamp_length
        )


def parse_suite(suite: str) -> SuiteDescriptor:
    """
    Parse an OCRA suite string.

    Args:
        suite: The suite, e.g. ``OCRA-1:HOTP-SHA256-8:C-QN08-PSHA1``

    Returns:
        SuiteDescriptor for the suite

    Raises:
        InvalidSuiteError: If the suite has fewer than three segments, an
            unknown hash algorithm, or code digits outside 0..8
    """
    segments = suite.split(":")
    while segments and segments[-1] == "":
        segments.pop()

    if len(segments) < 3:
        raise InvalidSuiteError(suite, "expected <version>:<crypto>:<data input>")

    version, crypto_function, data_input = segments[0], segments[1], segments[2]

    hash_algorithm = _parse_hash_algorithm(suite, crypto_function)
    code_digits = _parse_code_digits(suite, crypto_function)

    has_counter = False
    question_length = 0
    password_length = 0
    session_info_length = 0
    has_timestamp = False

    for token in data_input.lower().split("-"):
        if token == "c":
            has_counter = True
        elif token.startswith("q"):
            question_length = QUESTION_SIZE
        elif token in PASSWORD_SIZES:
            if password_length:
                raise InvalidSuiteError(suite, "more than one password hash")
            password_length = PASSWORD_SIZES[token]
        elif token in SESSION_INFO_SIZES:
            session_info_length = SESSION_INFO_SIZES[token]
        elif token == "s":
            # Compatibility: bare "s" has always meant 64 bytes of session info
            session_info_length = BARE_SESSION_INFO_SIZE
        elif token.startswith("t"):
            has_timestamp = True

    return SuiteDescriptor(
        suite=suite,
        version=version,
        hash_algorithm=hash_algorithm,
        code_digits=code_digits,
        has_counter=has_counter,
        question_length=question_length,
        password_length=password_length,
        session_info_length=session_info_length,
        has_timestamp=has_timestamp,
    )


def _parse_hash_algorithm(suite: str, crypto_function: str) -> HashAlgorithm:
    lowered = crypto_function.lower()
    for algorithm in (HashAlgorithm.SHA512, HashAlgorithm.SHA256, HashAlgorithm.SHA1):
        if algorithm.value in lowered:
            return algorithm
    raise InvalidSuiteError(suite, f"unsupported crypto function {crypto_function!r}")


def _parse_code_digits(suite: str, crypto_function: str) -> int:
    digits = crypto_function[crypto_function.rfind("-") + 1:]
    if not (digits.isascii() and digits.isdigit()):
        raise InvalidSuiteError(suite, f"code digits {digits!r} is not a number")

    code_digits = int(digits)
    if code_digits > MAX_CODE_DIGITS:
        raise InvalidSuiteError(suite, f"code digits {code_digits} exceeds {MAX_CODE_DIGITS}")
    return code_digits
