"""Models for Tiqr enrollment and authentication."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .message import ChallengeInput
from .urls import ChallengeUrl
from .types import (
    AccountBlockedError,
    ChallengeAlreadyAnsweredError,
    ChallengeSupersededError,
    CryptoUnavailableError,
    EnrollmentRejectedError,
    InvalidChallengeError,
    InvalidInputError,
    InvalidPinError,
    InvalidSuiteError,
    InvalidUrlError,
    InvalidUserError,
    PinMismatchError,
    PinRequiredError,
    SecretNotFoundError,
    ServerRejectedError,
    TiqrError,
    TransportError,
)


@dataclass(frozen=True)
class Service:
    """An identity provider a user can enroll with."""
    identifier: str
    display_name: str
    ocra_suite: str
    authentication_url: str
    enrollment_url: str
    logo_url: str = ""
    info_url: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Service":
        """Creates a service from the enrollment metadata document."""
        return cls(
            identifier=data["identifier"],
            display_name=data["displayName"],
            ocra_suite=data["ocraSuite"],
            authentication_url=data["authenticationUrl"],
            enrollment_url=data["enrollmentUrl"],
            logo_url=data.get("logoUrl", ""),
            info_url=data.get("infoUrl", ""),
        )


@dataclass(frozen=True)
class Identity:
    """A user account at a service."""
    identifier: str
    display_name: str

    @classmethod
    def from_dict(cls, data: dict) -> "Identity":
        return cls(identifier=data["identifier"], display_name=data["displayName"])


@dataclass(frozen=True)
class EnrollmentMetadata:
    """Metadata returned for an enrollment URL."""
    service: Service
    identity: Identity

    @classmethod
    def from_dict(cls, data: dict) -> "EnrollmentMetadata":
        """
        Creates metadata from the decoded JSON document.

        Raises:
            KeyError: If a required field is missing
        """
        return cls(
            service=Service.from_dict(data["service"]),
            identity=Identity.from_dict(data["identity"]),
        )


@dataclass(frozen=True)
class EnrollmentRequest:
    """Payload sent to the enrollment URL to register a secret."""
    secret: str  # hex
    language: str = "en"
    notification_address: Optional[str] = None

    def __repr__(self) -> str:
        return (
            f"EnrollmentRequest(secret=<redacted>, language={self.language!r}, "
            f"notification_address={self.notification_address!r})"
        )


class EnrollmentState(Enum):
    """Lifecycle of an enrollment."""
    SCANNED = "scanned"
    PIN_ENTERED = "pin_entered"
    PIN_CONFIRMED = "pin_confirmed"
    REGISTERED = "registered"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (EnrollmentState.REGISTERED, EnrollmentState.CANCELLED)


@dataclass
class EnrollmentContext:
    """State of one enrollment, from scan to registration."""
    enrollment_url: str
    service: Service
    identity: Identity
    candidate_pin: Optional[str] = field(default=None, repr=False)
    confirmed_pin: Optional[str] = field(default=None, repr=False)
    state: EnrollmentState = EnrollmentState.SCANNED

    def clear_pins(self) -> None:
        """Forget both PIN entries."""
        self.candidate_pin = None
        self.confirmed_pin = None


class PinChoice(Enum):
    """Choices offered when the PIN confirmation does not match."""
    ABANDON = "abandon"
    RETRY = "retry"


@dataclass(frozen=True)
class PinConfirmation:
    """Outcome of confirming the PIN."""
    matched: bool
    cancelable: bool = False
    choices: tuple = ()
    failure: Optional["ChallengeCompleteFailure"] = None

    @classmethod
    def match(cls) -> "PinConfirmation":
        return cls(matched=True)

    @classmethod
    def mismatch(cls) -> "PinConfirmation":
        """Non-cancelable prompt: abandon the enrollment or enter the PIN again."""
        return cls(
            matched=False,
            cancelable=False,
            choices=(PinChoice.ABANDON, PinChoice.RETRY),
            failure=ChallengeCompleteFailure.from_error(PinMismatchError()),
        )


@dataclass(frozen=True)
class Challenge:
    """A server-issued authentication challenge bound to one stored secret."""
    id: str
    identity_id: str
    service_id: str
    suite: str
    question: str
    counter: Optional[str] = None
    session_info: Optional[str] = None
    timestamp: Optional[str] = None
    service_provider: str = ""

    @classmethod
    def from_url(cls, url: ChallengeUrl, service: Service, identity_id: Optional[str] = None) -> "Challenge":
        """
        Creates a challenge from a parsed authentication URL.

        The session key doubles as the session information for suites with an
        S data input.

        Raises:
            InvalidUrlError: If the URL is for another service, or names no
                identity and none is given
        """
        if url.service_id != service.identifier:
            raise InvalidUrlError(
                f"Challenge is for service {url.service_id!r}, not {service.identifier!r}"
            )

        identity = url.identity_id or identity_id
        if not identity:
            raise InvalidUrlError("No identity for challenge")
        return cls(
            id=url.session_key,
            identity_id=identity,
            service_id=service.identifier,
            suite=service.ocra_suite,
            question=url.challenge,
            session_info=url.session_key,
            service_provider=url.service_provider,
        )

    def to_input(self, password: Optional[str] = None) -> ChallengeInput:
        """Builds the OCRA data input for this challenge."""
        return ChallengeInput(
            question=self.question,
            counter=self.counter,
            password=password,
            session_info=self.session_info,
            timestamp=self.timestamp,
        )


class AuthenticationOutcome(Enum):
    """Server verdict on a submitted response."""
    ACCEPTED = "accepted"
    INVALID_RESPONSE = "invalid_response"
    INVALID_CHALLENGE = "invalid_challenge"
    ACCOUNT_BLOCKED = "account_blocked"
    INVALID_USER = "invalid_user"


@dataclass(frozen=True)
class AuthenticationResponse:
    """Result of submitting a response code."""
    outcome: AuthenticationOutcome
    remaining_attempts: Optional[int] = None

    @classmethod
    def accepted(cls) -> "AuthenticationResponse":
        return cls(outcome=AuthenticationOutcome.ACCEPTED)

    @classmethod
    def rejected(cls, remaining_attempts: Optional[int] = None) -> "AuthenticationResponse":
        return cls(
            outcome=AuthenticationOutcome.INVALID_RESPONSE,
            remaining_attempts=remaining_attempts,
        )

    def raise_for_outcome(self) -> None:
        """
        Raise the error matching a negative outcome.

        Raises:
            ServerRejectedError: The code was wrong
            InvalidChallengeError: The challenge expired or is unknown
            AccountBlockedError: The identity is blocked
            InvalidUserError: The identity is unknown
        """
        if self.outcome is AuthenticationOutcome.ACCEPTED:
            return
        if self.outcome is AuthenticationOutcome.INVALID_RESPONSE:
            raise ServerRejectedError(self.remaining_attempts)
        if self.outcome is AuthenticationOutcome.INVALID_CHALLENGE:
            raise InvalidChallengeError("Challenge is no longer valid")
        if self.outcome is AuthenticationOutcome.ACCOUNT_BLOCKED:
            raise AccountBlockedError("Account is blocked")
        raise InvalidUserError("Identity is unknown to the server")


# (title, message) shown to the user, by error type
_FAILURE_MESSAGES = (
    (InvalidSuiteError, "Unsupported service", "The service uses an authentication method this app does not support."),
    (InvalidInputError, "Invalid challenge", "The challenge could not be read."),
    (CryptoUnavailableError, "Unsupported device", "This device cannot compute the response for this service."),
    (TransportError, "Connection failed", "Could not reach the server. Check your connection and try again."),
    (ServerRejectedError, "Wrong PIN", "The response was rejected. Check your PIN and try again."),
    (PinMismatchError, "PINs do not match", "The PINs you entered do not match. Please try again."),
    (InvalidPinError, "Wrong PIN", "The PIN you entered is incorrect."),
    (PinRequiredError, "PIN required", "Enter your PIN to continue."),
    (SecretNotFoundError, "Unknown account", "This account is not enrolled on this device."),
    (AccountBlockedError, "Account blocked", "Your account is blocked. Contact the service to unblock it."),
    (InvalidChallengeError, "Invalid challenge", "The challenge has expired or was already used."),
    (InvalidUserError, "Unknown account", "The server does not know this account."),
    (EnrollmentRejectedError, "Enrollment failed", "The server refused the enrollment."),
    (ChallengeAlreadyAnsweredError, "Invalid challenge", "The challenge was already answered."),
    (ChallengeSupersededError, "Cancelled", "A newer login request replaced this one."),
    (InvalidUrlError, "Invalid code", "The scanned code is not a valid enrollment or login code."),
)


@dataclass(frozen=True)
class ChallengeCompleteFailure:
    """Why an enrollment or authentication attempt failed."""
    reason: str
    title: str
    message: str
    recoverable: bool = False

    @classmethod
    def from_error(cls, error: Exception) -> "ChallengeCompleteFailure":
        """Classifies an exception into a user-facing failure."""
        for error_type, title, message in _FAILURE_MESSAGES:
            if isinstance(error, error_type):
                if isinstance(error, ServerRejectedError) and error.remaining_attempts is not None:
                    message = f"{message} Attempts left: {error.remaining_attempts}."
                return cls(
                    reason=error_type.__name__,
                    title=title,
                    message=message,
                    recoverable=error.recoverable,
                )

        recoverable = isinstance(error, TiqrError) and error.recoverable
        return cls(
            reason=type(error).__name__,
            title="Unexpected error",
            message="Something went wrong. Please try again.",
            recoverable=recoverable,
        )


class ChallengeCompleteResult:
    """Terminal outcome of an enrollment or authentication: Success or Failure."""

    @property
    def is_success(self) -> bool:
        return isinstance(self, Success)


@dataclass(frozen=True)
class Success(ChallengeCompleteResult):
    """The attempt succeeded."""
    pass


@dataclass(frozen=True)
class Failure(ChallengeCompleteResult):
    """The attempt failed; `failure` explains why."""
    failure: ChallengeCompleteFailure

    @classmethod
    def from_error(cls, error: Exception) -> "Failure":
        return cls(failure=ChallengeCompleteFailure.from_error(error))
