"""
Authentication coordinator.

Answers server-issued challenges: loads the enrollment secret, computes the
OCRA response, submits it and reports a ChallengeCompleteResult.
"""

import asyncio
import logging
from typing import Optional

from .config import TiqrConfig
from .models import (
    AuthenticationOutcome,
    AuthenticationResponse,
    Challenge,
    ChallengeCompleteFailure,
    ChallengeCompleteResult,
    Failure,
    Success,
)
from .ocra import compute_response_with_key, hash_password
from .storage import SecretStore
from .suite import parse_suite
from .transport import AuthenticationTransport
from .types import (
    ChallengeAlreadyAnsweredError,
    ChallengeSupersededError,
    PinRequiredError,
    SecretNotFoundError,
    TransportError,
)

log = logging.getLogger(__name__)


class AuthenticationCoordinator:
    """
    Coordinates authentication attempts for enrolled identities.

    At most one attempt is in flight: a new challenge cancels the attempt
    before it, whose caller receives a ChallengeSupersededError failure.
    Response codes are single use per challenge. Issued, accepted and
    rejected codes are remembered for the most recent
    MAX_TRACKED_CHALLENGES challenges.

    Example usage:
        ```python
        coordinator = AuthenticationCoordinator(transport, FileSecretStore())

        challenge = Challenge.from_url(parse_authentication_url(url), service)
        result = await coordinator.authenticate(challenge, pin="1234")
        if result.is_success:
            ...
        ```
    """

    MAX_TRACKED_CHALLENGES = 256

    def __init__(
        self,
        transport: AuthenticationTransport,
        secret_store: SecretStore,
        config: Optional[TiqrConfig] = None,
    ) -> None:
        self.transport = transport
        self.secret_store = secret_store
        self.config = config or TiqrConfig.default()
        self._current: Optional[asyncio.Task] = None
        self._superseded: set[asyncio.Task] = set()
        self._issued: dict[str, str] = {}
        self._rejected: dict[tuple[str, str], None] = {}
        self._answered: dict[str, None] = {}

    async def authenticate(
        self, challenge: Challenge, pin: Optional[str] = None
    ) -> ChallengeCompleteResult:
        """
        Answer a challenge.

        Args:
            challenge: The challenge to answer.
            pin: PIN unlocking the stored secret; also the password for
                suites with a PSHA data input.

        Returns:
            Success, or Failure with a title/message for the user. The
            response code is never part of the failure.
        """
        previous = self._current
        if previous is not None and not previous.done():
            log.debug("Challenge %s supersedes the attempt in flight", challenge.id)
            self._superseded.add(previous)
            previous.cancel()

        task = asyncio.ensure_future(self._authenticate(challenge, pin))
        self._current = task
        try:
            return await task
        except asyncio.CancelledError:
            if task in self._superseded:
                return Failure.from_error(ChallengeSupersededError(challenge.id))
            raise
        finally:
            self._superseded.discard(task)
            if self._current is task:
                self._current = None

    async def compute(self, challenge: Challenge, pin: Optional[str] = None) -> str:
        """
        Compute the response code for a challenge.

        Every call builds the message afresh; the same challenge, secret and
        PIN always produce the same code.

        Raises:
            PinRequiredError: If the suite has a PSHA input and no PIN is given.
            SecretNotFoundError: If the identity is not enrolled.
            InvalidPinError: If the PIN does not unlock the secret.
            InvalidSuiteError, InvalidInputError, CryptoUnavailableError:
                If the response cannot be computed.
        """
        descriptor = parse_suite(challenge.suite)

        password = None
        if descriptor.password_algorithm is not None:
            if not pin:
                raise PinRequiredError()
            password = hash_password(pin, descriptor.password_algorithm)

        stored = await self.secret_store.get(challenge.identity_id, challenge.service_id, pin=pin)
        if stored is None:
            raise SecretNotFoundError(challenge.identity_id, challenge.service_id)

        key = bytearray(stored)
        del stored
        try:
            code = await asyncio.to_thread(
                compute_response_with_key, challenge.suite, key, challenge.to_input(password)
            )
        finally:
            key[:] = bytes(len(key))

        self._remember(self._issued, challenge.id, code)
        return code

    async def submit_code(self, challenge: Challenge, code: str) -> AuthenticationResponse:
        """
        Submit a response code for a challenge.

        Raises:
            ChallengeAlreadyAnsweredError: If the code was not computed for this
                challenge, the challenge was already accepted, or the same code
                was already rejected.
            TransportError: On network failure or timeout.
            ServerRejectedError: If the server rejects the code.
            InvalidChallengeError, AccountBlockedError, InvalidUserError:
                For the other negative server outcomes.
        """
        if challenge.id in self._answered:
            raise ChallengeAlreadyAnsweredError(f"Challenge {challenge.id} was already answered")
        if self._issued.get(challenge.id) != code:
            raise ChallengeAlreadyAnsweredError(
                f"Response was not computed for challenge {challenge.id}"
            )
        if (challenge.id, code) in self._rejected:
            raise ChallengeAlreadyAnsweredError(
                f"Response for challenge {challenge.id} was already rejected"
            )

        # A submitted code is spent whatever the outcome; retries compute again
        del self._issued[challenge.id]

        try:
            response = await asyncio.wait_for(
                self.transport.submit_response(challenge, code),
                timeout=self.config.submit_timeout,
            )
        except asyncio.TimeoutError as e:
            raise TransportError("Submitting the response timed out") from e

        if response.outcome is AuthenticationOutcome.ACCEPTED:
            self._remember(self._answered, challenge.id)
        elif response.outcome is AuthenticationOutcome.INVALID_RESPONSE:
            self._remember(self._rejected, (challenge.id, code))

        response.raise_for_outcome()
        return response

    async def _authenticate(
        self, challenge: Challenge, pin: Optional[str]
    ) -> ChallengeCompleteResult:
        try:
            code = await self.compute(challenge, pin)
            await self.submit_code(challenge, code)
        except Exception as e:
            failure = ChallengeCompleteFailure.from_error(e)
            log.warning(
                "Authentication of %s at %s failed: %s",
                challenge.identity_id,
                challenge.service_id,
                failure.reason,
            )
            return Failure(failure=failure)

        log.debug("Challenge %s accepted", challenge.id)
        return Success()

    def _remember(self, entries: dict, key, value=None) -> None:
        """Record an entry, dropping the oldest beyond MAX_TRACKED_CHALLENGES."""
        entries.pop(key, None)
        entries[key] = value
        while len(entries) > self.MAX_TRACKED_CHALLENGES:
            del entries[next(iter(entries))]
