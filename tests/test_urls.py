"""Tests for enrollment and authentication URLs."""

import pytest
from tiqr.models import Challenge, Service
from tiqr.types import InvalidUrlError
from tiqr.urls import parse_authentication_url, parse_enrollment_url
from .test_vectors import TIQR_SUITE


SERVICE = Service(
    identifier="tiqr.example.org",
    display_name="Example",
    ocra_suite=TIQR_SUITE,
    authentication_url="https://tiqr.example.org/auth",
    enrollment_url="https://tiqr.example.org/enroll",
)


class TestEnrollmentUrl:
    """Test enrollment URL parsing."""

    def test_tiqrenroll_scheme(self) -> None:
        """The metadata URL follows the tiqrenroll:// prefix."""
        url = "tiqrenroll://https://tiqr.example.org/metadata?key=abc"
        assert parse_enrollment_url(url) == "https://tiqr.example.org/metadata?key=abc"

    def test_plain_metadata_url(self) -> None:
        """A plain https URL is accepted as is."""
        assert parse_enrollment_url("https://tiqr.example.org/m") == "https://tiqr.example.org/m"

    @pytest.mark.parametrize(
        "url",
        ["tiqrenroll://ftp://example.org/m", "tiqrenroll://", "tiqrenroll://https://", "garbage"],
    )
    def test_invalid(self, url) -> None:
        """Non-http metadata URLs are rejected."""
        with pytest.raises(InvalidUrlError):
            parse_enrollment_url(url)


class TestAuthenticationUrl:
    """Test authentication URL parsing."""

    def test_full_url(self) -> None:
        """All components are extracted."""
        url = "tiqrauth://john%40example.org@tiqr.example.org/a1b2c3/0123456789/sp.example.org/2"
        parsed = parse_authentication_url(url)

        assert parsed.identity_id == "john@example.org"
        assert parsed.service_id == "tiqr.example.org"
        assert parsed.session_key == "a1b2c3"
        assert parsed.challenge == "0123456789"
        assert parsed.service_provider == "sp.example.org"
        assert parsed.protocol_version == "2"

    def test_without_identity(self) -> None:
        """The identity is optional."""
        parsed = parse_authentication_url("tiqrauth://tiqr.example.org/a1b2/ff00")

        assert parsed.identity_id is None
        assert parsed.service_provider == ""
        assert parsed.protocol_version is None

    @pytest.mark.parametrize(
        "url",
        [
            "tiqrenroll://tiqr.example.org/a1/b2",
            "tiqrauth://tiqr.example.org/a1b2",
            "tiqrauth:///a1b2/ff00",
            "tiqrauth://tiqr.example.org//ff00",
        ],
    )
    def test_invalid(self, url) -> None:
        """Malformed URLs are rejected."""
        with pytest.raises(InvalidUrlError):
            parse_authentication_url(url)

    def test_challenge_from_url(self) -> None:
        """The session key is the challenge id and session information."""
        parsed = parse_authentication_url("tiqrauth://john@tiqr.example.org/a1b2/ff00")
        challenge = Challenge.from_url(parsed, SERVICE)

        assert challenge.id == "a1b2"
        assert challenge.identity_id == "john"
        assert challenge.service_id == "tiqr.example.org"
        assert challenge.suite == TIQR_SUITE
        assert challenge.question == "ff00"
        assert challenge.session_info == "a1b2"

    def test_challenge_for_other_service(self) -> None:
        """A challenge naming another service is not bound to this one."""
        parsed = parse_authentication_url("tiqrauth://john@evil.example.com/a1b2/ff00")

        with pytest.raises(InvalidUrlError, match="evil.example.com"):
            Challenge.from_url(parsed, SERVICE)

    def test_challenge_needs_identity(self) -> None:
        """A challenge without any identity is rejected."""
        parsed = parse_authentication_url("tiqrauth://tiqr.example.org/a1b2/ff00")

        with pytest.raises(InvalidUrlError):
            Challenge.from_url(parsed, SERVICE)

        assert Challenge.from_url(parsed, SERVICE, identity_id="john").identity_id == "john"
