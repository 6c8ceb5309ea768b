"""Tests for OCRA suite parsing."""

import pytest
from tiqr.suite import HashAlgorithm, parse_suite
from tiqr.types import InvalidSuiteError


class TestParseSuite:
    """Test the suite string parser."""

    def test_question_only(self) -> None:
        """QN08 declares a 128-byte question and nothing else."""
        descriptor = parse_suite("OCRA-1:HOTP-SHA1-6:QN08")

        assert descriptor.version == "OCRA-1"
        assert descriptor.hash_algorithm is HashAlgorithm.SHA1
        assert descriptor.code_digits == 6
        assert not descriptor.has_counter
        assert descriptor.question_length == 128
        assert descriptor.password_length == 0
        assert descriptor.session_info_length == 0
        assert not descriptor.has_timestamp
        assert descriptor.message_length == len("OCRA-1:HOTP-SHA1-6:QN08") + 1 + 128

    def test_counter_question_password(self) -> None:
        """C-QN08-PSHA1 declares counter, question and a 20-byte password."""
        descriptor = parse_suite("OCRA-1:HOTP-SHA256-8:C-QN08-PSHA1")

        assert descriptor.hash_algorithm is HashAlgorithm.SHA256
        assert descriptor.code_digits == 8
        assert descriptor.has_counter
        assert descriptor.counter_length == 8
        assert descriptor.question_length == 128
        assert descriptor.password_length == 20
        assert descriptor.password_algorithm is HashAlgorithm.SHA1

    @pytest.mark.parametrize(
        "token,length",
        [("PSHA1", 20), ("PSHA256", 32), ("PSHA512", 64)],
    )
    def test_password_lengths(self, token, length) -> None:
        """Password hash lengths follow the hash function."""
        descriptor = parse_suite(f"OCRA-1:HOTP-SHA512-8:QN08-{token}")
        assert descriptor.password_length == length
        assert descriptor.session_info_length == 0

    @pytest.mark.parametrize(
        "token,length",
        [("S064", 64), ("S128", 128), ("S256", 256), ("S512", 512), ("S", 64)],
    )
    def test_session_info_lengths(self, token, length) -> None:
        """Session information lengths, including the bare S extension."""
        descriptor = parse_suite(f"OCRA-1:HOTP-SHA1-6:QH10-{token}")
        assert descriptor.session_info_length == length

    def test_password_does_not_imply_session_info(self) -> None:
        """The 's' inside PSHA1 is not a session information field."""
        descriptor = parse_suite("OCRA-1:HOTP-SHA256-8:QN08-PSHA1")
        assert descriptor.session_info_length == 0

    def test_timestamp(self) -> None:
        """T1M declares an 8-byte timestamp."""
        descriptor = parse_suite("OCRA-1:HOTP-SHA512-8:QN08-T1M")
        assert descriptor.has_timestamp
        assert descriptor.timestamp_length == 8

    def test_case_insensitive(self) -> None:
        """Tokens match regardless of case."""
        descriptor = parse_suite("ocra-1:hotp-sha1-6:c-qn08-psha1-s064-t1m")

        assert descriptor.hash_algorithm is HashAlgorithm.SHA1
        assert descriptor.has_counter
        assert descriptor.question_length == 128
        assert descriptor.password_length == 20
        assert descriptor.session_info_length == 64
        assert descriptor.has_timestamp

    def test_trailing_colon(self) -> None:
        """Trailing empty segments are dropped."""
        descriptor = parse_suite("OCRA-1:HOTP-SHA1-6:QN08:")
        assert descriptor.question_length == 128

    def test_zero_digits(self) -> None:
        """Zero code digits is a valid configuration."""
        assert parse_suite("OCRA-1:HOTP-SHA1-0:QN08").code_digits == 0

    def test_descriptor_is_immutable(self) -> None:
        """Descriptors cannot be modified after parsing."""
        descriptor = parse_suite("OCRA-1:HOTP-SHA1-6:QN08")
        with pytest.raises(AttributeError):
            descriptor.code_digits = 8


class TestInvalidSuites:
    """Test rejection of malformed suites."""

    @pytest.mark.parametrize(
        "suite",
        [
            "OCRA-1:HOTP-MD5-6:QN08",
            "OCRA-1:HOTP-SHA1-9:QN08",
            "OCRA-1:HOTP-SHA1-X:QN08",
            "OCRA-1:HOTP-SHA1-:QN08",
            "OCRA-1:HOTP-SHA1-6",
            "",
            "OCRA-1:HOTP-SHA1-6:QN08-PSHA1-PSHA256",
        ],
    )
    def test_rejected(self, suite) -> None:
        """Each malformed suite raises InvalidSuiteError."""
        with pytest.raises(InvalidSuiteError):
            parse_suite(suite)
