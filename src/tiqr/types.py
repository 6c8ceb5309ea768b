"""Type definitions for Tiqr."""

from typing import Optional


# Truncation moduli, indexed by the number of code digits
DIGITS_POWER = (1, 10, 100, 1000, 10000, 100000, 1000000, 10000000, 100000000)
MAX_CODE_DIGITS = 8

# OCRA data input field sizes (bytes)
COUNTER_SIZE = 8
QUESTION_SIZE = 128
TIMESTAMP_SIZE = 8
PASSWORD_SIZES = {"psha1": 20, "psha256": 32, "psha512": 64}
SESSION_INFO_SIZES = {"s064": 64, "s128": 128, "s256": 256, "s512": 512}
BARE_SESSION_INFO_SIZE = 64  # "s" without a length suffix

# Message delimiter between the suite string and the data input
SUITE_DELIMITER = b"\x00"

# Enrollment constants
SECRET_SIZE = 32
ENROLLMENT_RESPONSE_OK = 1

# URL schemes
ENROLLMENT_SCHEME = "tiqrenroll"
AUTHENTICATION_SCHEME = "tiqrauth"


# Exception types
class TiqrError(Exception):
    """Base exception for Tiqr errors."""

    recoverable = False


class InvalidSuiteError(TiqrError):
    """Malformed OCRA suite string."""

    def __init__(self, suite: str, reason: str) -> None:
        self.suite = suite
        super().__init__(f"Invalid OCRA suite {suite!r}: {reason}")


class InvalidInputError(TiqrError):
    """Challenge field or secret is not valid hex of an acceptable length."""
    pass


class CryptoUnavailableError(TiqrError):
    """The hash primitive for the suite cannot be instantiated."""
    pass


class TransportError(TiqrError):
    """Network failure or timeout talking to the server."""

    recoverable = True


class ServerRejectedError(TiqrError):
    """The server declared the response code wrong."""

    recoverable = True

    def __init__(self, remaining_attempts: Optional[int] = None) -> None:
        self.remaining_attempts = remaining_attempts
        if remaining_attempts is None:
            super().__init__("Response rejected by server")
        else:
            super().__init__(
                f"Response rejected by server, {remaining_attempts} attempts left"
            )


class PinMismatchError(TiqrError):
    """PIN confirmation did not match the entered PIN."""

    recoverable = True

    def __init__(self) -> None:
        super().__init__("PIN confirmation does not match")


class InvalidPinError(TiqrError):
    """The stored secret could not be unlocked with the given PIN."""

    recoverable = True

    def __init__(self) -> None:
        super().__init__("Unlocking the secret failed - incorrect PIN or corrupted data")


class PinRequiredError(TiqrError):
    """A PIN is required to store or unlock a secret."""

    recoverable = True

    def __init__(self) -> None:
        super().__init__("PIN is required for file secret storage")


class SecretNotFoundError(TiqrError):
    """No secret is stored for an identity/service pair."""

    def __init__(self, identity_id: str, service_id: str) -> None:
        self.identity_id = identity_id
        self.service_id = service_id
        super().__init__(f"No secret for identity {identity_id!r} at {service_id!r}")


class AccountBlockedError(TiqrError):
    """The server blocked the identity after too many failed attempts."""
    pass


class InvalidChallengeError(TiqrError):
    """The server no longer accepts responses for the challenge."""
    pass


class InvalidUserError(TiqrError):
    """The server does not know the identity."""
    pass


class EnrollmentRejectedError(TiqrError):
    """The server refused to confirm the enrollment."""

    def __init__(self, response_code: int) -> None:
        self.response_code = response_code
        super().__init__(f"Enrollment rejected with response code {response_code}")


class ChallengeAlreadyAnsweredError(TiqrError):
    """A response code was offered for a challenge it was not computed for."""
    pass


class ChallengeSupersededError(TiqrError):
    """The authentication attempt was replaced by a newer challenge."""

    recoverable = True

    def __init__(self, challenge_id: str) -> None:
        self.challenge_id = challenge_id
        super().__init__(f"Challenge {challenge_id} was superseded")


class InvalidUrlError(TiqrError):
    """Malformed enrollment or authentication URL."""
    pass


class InvalidStateError(TiqrError):
    """Operation is not valid in the current enrollment/authentication state."""
    pass


class StorageError(TiqrError):
    """Storage operation failed."""
    pass
