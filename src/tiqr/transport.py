"""
Transport interfaces for talking to a Tiqr server.

This module provides abstract base classes for the enrollment and
authentication endpoints. Implementations can use any HTTP client; they
raise TransportError on network failures.
"""

from abc import ABC, abstractmethod

from .models import AuthenticationResponse, Challenge, EnrollmentMetadata, EnrollmentRequest


class EnrollmentTransport(ABC):
    """Abstract base class for the enrollment endpoints."""

    @abstractmethod
    async def fetch_metadata(self, enrollment_url: str) -> EnrollmentMetadata:
        """Fetch the service and identity metadata for an enrollment URL."""
        pass

    @abstractmethod
    async def confirm_enrollment(self, enrollment_url: str, request: EnrollmentRequest) -> int:
        """Register the secret with the server; returns the server response code."""
        pass


class AuthenticationTransport(ABC):
    """Abstract base class for the authentication endpoint."""

    @abstractmethod
    async def submit_response(self, challenge: Challenge, code: str) -> AuthenticationResponse:
        """Submit a response code for a challenge."""
        pass
