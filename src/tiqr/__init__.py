"""
Tiqr - two-factor authentication with OCRA challenge-response

Python implementation of the Tiqr client protocol: OCRA (RFC 6287) response
computation, enrollment and authentication.
"""

from .suite import HashAlgorithm, SuiteDescriptor, parse_suite
from .message import ChallengeInput, build_message, hex_to_bytes, pad_left, pad_right
from .ocra import (
    compute_response,
    compute_response_with_key,
    decode_secret,
    generate_secret,
    hash_password,
    hmac_digest,
    truncate,
)
from .types import (
    DIGITS_POWER,
    ENROLLMENT_RESPONSE_OK,
    SECRET_SIZE,
    TiqrError,
    InvalidSuiteError,
    InvalidInputError,
    CryptoUnavailableError,
    TransportError,
    ServerRejectedError,
    PinMismatchError,
    InvalidPinError,
    PinRequiredError,
    SecretNotFoundError,
    AccountBlockedError,
    InvalidChallengeError,
    InvalidUserError,
    EnrollmentRejectedError,
    ChallengeAlreadyAnsweredError,
    ChallengeSupersededError,
    InvalidUrlError,
    InvalidStateError,
    StorageError,
)
from .models import (
    Service,
    Identity,
    EnrollmentMetadata,
    EnrollmentRequest,
    EnrollmentState,
    EnrollmentContext,
    PinChoice,
    PinConfirmation,
    Challenge,
    AuthenticationOutcome,
    AuthenticationResponse,
    ChallengeCompleteFailure,
    ChallengeCompleteResult,
    Success,
    Failure,
)
from .urls import ChallengeUrl, parse_enrollment_url, parse_authentication_url
from .config import TiqrConfig
from .storage import SecretStore, InMemorySecretStore, FileSecretStore
from .transport import EnrollmentTransport, AuthenticationTransport
from .enrollment import EnrollmentCoordinator
from .authentication import AuthenticationCoordinator

__version__ = "0.1.0"

__all__ = [
    # Suite
    "HashAlgorithm",
    "SuiteDescriptor",
    "parse_suite",
    # Message
    "ChallengeInput",
    "build_message",
    "hex_to_bytes",
    "pad_left",
    "pad_right",
    # OCRA
    "compute_response",
    "compute_response_with_key",
    "decode_secret",
    "generate_secret",
    "hash_password",
    "hmac_digest",
    "truncate",
    # Constants
    "DIGITS_POWER",
    "ENROLLMENT_RESPONSE_OK",
    "SECRET_SIZE",
    # Errors
    "TiqrError",
    "InvalidSuiteError",
    "InvalidInputError",
    "CryptoUnavailableError",
    "TransportError",
    "ServerRejectedError",
    "PinMismatchError",
    "InvalidPinError",
    "PinRequiredError",
    "SecretNotFoundError",
    "AccountBlockedError",
    "InvalidChallengeError",
    "InvalidUserError",
    "EnrollmentRejectedError",
    "ChallengeAlreadyAnsweredError",
    "ChallengeSupersededError",
    "InvalidUrlError",
    "InvalidStateError",
    "StorageError",
    # Models
    "Service",
    "Identity",
    "EnrollmentMetadata",
    "EnrollmentRequest",
    "EnrollmentState",
    "EnrollmentContext",
    "PinChoice",
    "PinConfirmation",
    "Challenge",
    "AuthenticationOutcome",
    "AuthenticationResponse",
    "ChallengeCompleteFailure",
    "ChallengeCompleteResult",
    "Success",
    "Failure",
    # URLs
    "ChallengeUrl",
    "parse_enrollment_url",
    "parse_authentication_url",
    # Config
    "TiqrConfig",
    # Storage
    "SecretStore",
    "InMemorySecretStore",
    "FileSecretStore",
    # Transport
    "EnrollmentTransport",
    "AuthenticationTransport",
    # Coordinators
    "EnrollmentCoordinator",
    "AuthenticationCoordinator",
]
