"""
Enrollment coordinator.

Drives one enrollment from a scanned URL to a registered secret:

    SCANNED -> PIN_ENTERED -> PIN_CONFIRMED -> REGISTERED

A PIN confirmation mismatch keeps the enrollment in PIN_ENTERED, a
recoverable registration failure returns to PIN_ENTERED, and any other
failure or an explicit cancel ends in CANCELLED.
"""

import asyncio
import logging
from typing import Optional

from .config import TiqrConfig
from .models import (
    ChallengeCompleteFailure,
    ChallengeCompleteResult,
    EnrollmentContext,
    EnrollmentRequest,
    EnrollmentState,
    Failure,
    PinChoice,
    PinConfirmation,
    Success,
)
from .ocra import generate_secret
from .storage import SecretStore
from .suite import parse_suite
from .transport import EnrollmentTransport
from .types import (
    ENROLLMENT_RESPONSE_OK,
    EnrollmentRejectedError,
    InvalidStateError,
    TransportError,
)
from .urls import parse_enrollment_url

log = logging.getLogger(__name__)


class EnrollmentCoordinator:
    """
    Coordinates the enrollment of one identity.

    Example usage:
        ```python
        coordinator = EnrollmentCoordinator(transport, FileSecretStore())

        context = await coordinator.scan("tiqrenroll://https://example.org/metadata")
        coordinator.enter_pin("1234")
        confirmation = coordinator.confirm_pin("1234")

        if confirmation.matched:
            result = await coordinator.register()
        ```
    """

    def __init__(
        self,
        transport: EnrollmentTransport,
        secret_store: SecretStore,
        config: Optional[TiqrConfig] = None,
    ) -> None:
        self.transport = transport
        self.secret_store = secret_store
        self.config = config or TiqrConfig.default()
        self._context: Optional[EnrollmentContext] = None
        self._registration: Optional[asyncio.Task] = None

    @property
    def context(self) -> Optional[EnrollmentContext]:
        """The current enrollment, if any."""
        return self._context

    @property
    def state(self) -> Optional[EnrollmentState]:
        return self._context.state if self._context else None

    # MARK: - Scan

    async def scan(self, url: str) -> EnrollmentContext:
        """
        Start an enrollment from a scanned URL.

        Args:
            url: A ``tiqrenroll://`` URL or a plain metadata URL.

        Returns:
            The new EnrollmentContext in state SCANNED.

        Raises:
            InvalidStateError: If another enrollment is still in progress.
            InvalidUrlError: If the URL is malformed.
            InvalidSuiteError: If the service uses an OCRA suite that cannot
                be computed.
            TransportError: If the metadata cannot be fetched.
        """
        if self._context is not None and not self._context.state.is_terminal:
            raise InvalidStateError("An enrollment is already in progress")

        metadata_url = parse_enrollment_url(url)
        try:
            metadata = await asyncio.wait_for(
                self.transport.fetch_metadata(metadata_url),
                timeout=self.config.submit_timeout,
            )
        except asyncio.TimeoutError as e:
            raise TransportError("Fetching enrollment metadata timed out") from e

        parse_suite(metadata.service.ocra_suite)

        self._context = EnrollmentContext(
            enrollment_url=metadata_url,
            service=metadata.service,
            identity=metadata.identity,
        )
        log.debug(
            "Enrollment scanned for %s at %s",
            metadata.identity.identifier,
            metadata.service.identifier,
        )
        return self._context

    # MARK: - PIN

    def enter_pin(self, pin: str) -> None:
        """
        Enter the PIN that will protect the secret.

        Any earlier PIN entry or confirmation is discarded.
        """
        context = self._require(EnrollmentState.SCANNED, EnrollmentState.PIN_ENTERED)
        if not pin:
            raise ValueError("PIN must not be empty")

        context.clear_pins()
        context.candidate_pin = pin
        self._transition(context, EnrollmentState.PIN_ENTERED)

    def confirm_pin(self, pin: str) -> PinConfirmation:
        """
        Confirm the PIN.

        The confirmation must equal the entered PIN exactly. On a mismatch
        the returned PinConfirmation offers ABANDON or RETRY and the
        enrollment stays in PIN_ENTERED.
        """
        context = self._require(EnrollmentState.PIN_ENTERED)
        if context.candidate_pin is None:
            raise InvalidStateError("No PIN entered")

        if pin != context.candidate_pin:
            log.debug("PIN confirmation mismatch")
            return PinConfirmation.mismatch()

        context.confirmed_pin = pin
        self._transition(context, EnrollmentState.PIN_CONFIRMED)
        return PinConfirmation.match()

    def retry_pin(self) -> None:
        """Discard the failed confirmation so it can be entered again."""
        context = self._require(EnrollmentState.PIN_ENTERED)
        context.confirmed_pin = None

    def choose(self, choice: PinChoice) -> None:
        """Apply the user's choice after a PIN mismatch."""
        if choice is PinChoice.ABANDON:
            self.cancel()
        else:
            self.retry_pin()

    # MARK: - Registration

    async def register(self) -> ChallengeCompleteResult:
        """
        Register a freshly generated secret with the server.

        On success the secret is committed to the secret store, protected by
        the confirmed PIN, and the enrollment moves to REGISTERED.

        Returns:
            Success, or Failure with a title/message for the user.

        Raises:
            InvalidStateError: If the PIN is not confirmed or a registration
                is already in flight.
        """
        context = self._require(EnrollmentState.PIN_CONFIRMED)
        if self._registration is not None and not self._registration.done():
            raise InvalidStateError("Registration already in progress")

        task = asyncio.ensure_future(self._register(context))
        self._registration = task
        try:
            return await task
        except asyncio.CancelledError:
            if task.cancelled() and context.state is EnrollmentState.CANCELLED:
                return Failure(
                    failure=ChallengeCompleteFailure(
                        reason="Cancelled",
                        title="Cancelled",
                        message="The enrollment was cancelled.",
                    )
                )
            raise
        finally:
            if self._registration is task:
                self._registration = None

    async def _register(self, context: EnrollmentContext) -> ChallengeCompleteResult:
        secret = bytearray(generate_secret(self.config.secret_size))
        try:
            request = EnrollmentRequest(
                secret=secret.hex(),
                language=self.config.language,
                notification_address=self.config.notification_address,
            )
            try:
                response_code = await asyncio.wait_for(
                    self.transport.confirm_enrollment(context.service.enrollment_url, request),
                    timeout=self.config.submit_timeout,
                )
            except asyncio.TimeoutError as e:
                raise TransportError("Enrollment confirmation timed out") from e

            if response_code != ENROLLMENT_RESPONSE_OK:
                raise EnrollmentRejectedError(response_code)

            await self.secret_store.put(
                context.identity.identifier,
                context.service.identifier,
                bytes(secret),
                pin=context.confirmed_pin,
            )
        except Exception as e:
            failure = ChallengeCompleteFailure.from_error(e)
            log.warning(
                "Enrollment of %s at %s failed: %s",
                context.identity.identifier,
                context.service.identifier,
                failure.reason,
            )
            if failure.recoverable:
                context.confirmed_pin = None
                self._transition(context, EnrollmentState.PIN_ENTERED)
            else:
                context.clear_pins()
                self._transition(context, EnrollmentState.CANCELLED)
            return Failure(failure=failure)
        finally:
            secret[:] = bytes(len(secret))

        context.clear_pins()
        self._transition(context, EnrollmentState.REGISTERED)
        return Success()

    # MARK: - Cancel

    def cancel(self) -> None:
        """Abandon the enrollment. Does nothing once it has ended."""
        context = self._context
        if context is None or context.state.is_terminal:
            return

        context.clear_pins()
        self._transition(context, EnrollmentState.CANCELLED)
        if self._registration is not None and not self._registration.done():
            self._registration.cancel()

    # MARK: - Private Helpers

    def _require(self, *states: EnrollmentState) -> EnrollmentContext:
        if self._context is None:
            raise InvalidStateError("No enrollment in progress")
        if self._context.state not in states:
            raise InvalidStateError(
                f"Not allowed in state {self._context.state.value}"
            )
        return self._context

    def _transition(self, context: EnrollmentContext, state: EnrollmentState) -> None:
        log.debug("Enrollment %s -> %s", context.state.value, state.value)
        context.state = state
