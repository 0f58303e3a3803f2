"""Update check / apply / cancel state machine.

Pull side: ``check_for_updates``, ``apply_updates`` and ``cancel_updates``
await backend calls. Push side: the event ingestor hands status and terminal
events to ``apply``. Both sides write the same ``UpdateSession``, so:

- overlapping checks are serialized by a generation token, only the newest
  check's response is applied; a completion event also advances the token;
- events are applied in ``seq`` order, older events are dropped;
- optimistic flags set before an awaited call are rolled back on failure
  only if no event has reconciled the session in the meantime.
"""

import logging
from typing import Dict, Any, Optional, Callable

from ..errors import UpdateNotCancellableError
from ..models.events import (
    BackendEvent,
    UpdateStatusEvent,
    UpdateCompletedEvent,
    UpdateCancelledEvent,
    UpdateFailedEvent,
    CancellationFailedEvent,
)
from ..models.messages import (
    Empty,
    CancellingUpdates,
    UpdateCompleted,
    UpdatesCancelled,
    UpdateFailed,
    CancellationFailed,
)
from ..models.update import UpdateSession, UpdateAvailability, UpdatePhase
from ..utils.settings import UpdateStatusCodes

logger = logging.getLogger(__name__)

OutcomeCallback = Callable[[str, Dict[str, Any]], None]

# Outcome keys passed to the outcome callback
OUTCOME_COMPLETED = "completed"
OUTCOME_CANCELLED = "cancelled"
OUTCOME_FAILED = "failed"
OUTCOME_CANCEL_FAILED = "cancel_failed"


def _clamp_fraction(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


class UpdateLifecycleCoordinator:
    """Owns ``UpdateSession`` and the current ``UpdateAvailability``."""

    def __init__(self, backend, session: UpdateSession,
                 status_codes: Optional[UpdateStatusCodes] = None):
        self.backend = backend
        self.session = session
        self.status_codes = status_codes or UpdateStatusCodes()
        self.availability: Optional[UpdateAvailability] = None

        self._check_generation = 0
        self._checks_in_flight = 0
        self._has_checked = False
        self._on_outcome: Optional[OutcomeCallback] = None

    def set_outcome_callback(self, callback: Optional[OutcomeCallback]) -> None:
        """Called with (outcome, details) on terminal and cancel-failed events"""
        self._on_outcome = callback

    # ── Derived state ────────────────────────────────────────────────

    @property
    def has_update(self) -> bool:
        return self.availability is not None

    @property
    def phase(self) -> UpdatePhase:
        if self.session.is_cancelling:
            return UpdatePhase.CANCELLING
        if self.session.is_running:
            return UpdatePhase.APPLYING
        if self._checks_in_flight:
            return UpdatePhase.CHECKING
        if self.availability is not None:
            return UpdatePhase.UPDATE_AVAILABLE
        if self._has_checked:
            return UpdatePhase.UP_TO_DATE
        return UpdatePhase.IDLE

    # ── Check ────────────────────────────────────────────────────────

    async def check_for_updates(self, force: bool = False) -> Optional[UpdateAvailability]:
        """Ask the backend whether an update is pending.

        Raises the backend error on failure; a failed check is never
        reported as "no update".
        """
        self._check_generation += 1
        generation = self._check_generation
        self._checks_in_flight += 1
        try:
            code = await self.backend.check_for_updates(force)
        except Exception as e:
            if generation != self._check_generation:
                logger.warning(f"[Updates] Ignoring failure of superseded check (generation {generation}): {e}")
                return self.availability
            raise
        finally:
            self._checks_in_flight -= 1

        if generation != self._check_generation:
            logger.info(f"[Updates] Dropping stale check result {code} (generation {generation} < {self._check_generation})")
            return self.availability

        self._has_checked = True
        if self.status_codes.has_update(code):
            self.availability = UpdateAvailability()
        else:
            self.availability = None
        logger.info(f"[Updates] Check result {code}, update available: {self.has_update}")
        return self.availability

    async def check_for_launcher_update(self) -> bool:
        """True only if a forced check reports the launcher-update code"""
        try:
            code = await self.backend.check_for_updates(True)
        except Exception as e:
            logger.warning(f"[Updates] Launcher update check failed: {e}")
            return False
        return self.status_codes.is_launcher_update(code)

    # ── Apply / Cancel ───────────────────────────────────────────────

    async def apply_updates(self) -> None:
        """Start applying updates; progress arrives only through events."""
        if self.session.is_running:
            logger.warning("[Updates] Update already running, ignoring apply request")
            return

        seq_before = self.session.last_event_seq
        self.session.is_running = True
        self.session.is_cancelling = False
        self.session.can_cancel = True
        self.session.cancellation_status = Empty()

        try:
            await self.backend.apply_updates()
        except Exception as e:
            if self.session.last_event_seq == seq_before:
                self.session.is_running = False
            logger.error(f"[Updates] Failed to start update: {e}")
            raise
        logger.info("[Updates] Update started")

    def _require_cancellable(self) -> None:
        if not self.session.is_running:
            raise UpdateNotCancellableError("no update is running")
        if not self.session.can_cancel:
            raise UpdateNotCancellableError("the current update phase cannot be interrupted")

    async def cancel_updates(self) -> None:
        """Request cooperative cancellation of the running update.

        Raises ``UpdateNotCancellableError`` before suspending when nothing
        is running or the backend marked the current phase uninterruptible.
        Completion is only observed through a terminal event.
        """
        self._require_cancellable()

        self.session.cancellation_status = CancellingUpdates()
        if self.session.is_cancelling:
            logger.debug("[Updates] Cancellation already requested")
            return

        seq_before = self.session.last_event_seq
        self.session.is_cancelling = True
        logger.info("[Updates] Requesting cancellation")

        try:
            await self.backend.cancel_updates()
        except Exception as e:
            if self.session.is_cancelling and self.session.last_event_seq == seq_before:
                self.session.is_cancelling = False
                self.session.cancellation_status = Empty()
            logger.error(f"[Updates] Cancellation request failed: {e}")
            raise

    # ── Events ───────────────────────────────────────────────────────

    def apply(self, event: BackendEvent) -> bool:
        """Merge a pushed event into the session. Returns False if dropped."""
        if event.seq <= self.session.last_event_seq:
            logger.debug(f"[Updates] Dropping out-of-order event seq={event.seq} (last={self.session.last_event_seq})")
            return False

        session = self.session
        outcome = None
        details: Dict[str, Any] = {}

        if isinstance(event, UpdateStatusEvent):
            session.status = event.status
            session.progress = _clamp_fraction(event.progress)
            session.download_progress = event.download_progress
            session.download_total = event.download_total
            session.download_bytes_per_second = event.download_bps
            session.can_cancel = event.can_cancel
        elif isinstance(event, UpdateCompletedEvent):
            session.finish(UpdateCompleted())
            session.progress = 1.0
            session.cancellation_status = Empty()
            self.availability = None
            # checks sent before completion must not resurrect the update
            self._check_generation += 1
            outcome = OUTCOME_COMPLETED
        elif isinstance(event, UpdateCancelledEvent):
            session.finish(UpdatesCancelled())
            session.cancellation_status = Empty()
            outcome = OUTCOME_CANCELLED
        elif isinstance(event, UpdateFailedEvent):
            session.finish(UpdateFailed(reason=event.reason))
            session.cancellation_status = Empty()
            outcome = OUTCOME_FAILED
            details = {'reason': event.reason}
        elif isinstance(event, CancellationFailedEvent):
            session.is_cancelling = False
            session.cancellation_status = CancellationFailed(reason=event.reason)
            outcome = OUTCOME_CANCEL_FAILED
            details = {'reason': event.reason}
        else:
            logger.warning(f"[Updates] Unsupported event {type(event).__name__}")
            return False

        session.last_event_seq = event.seq

        if outcome:
            logger.info(f"[Updates] Update outcome: {outcome}")
            if self._on_outcome:
                try:
                    self._on_outcome(outcome, details)
                except Exception as e:
                    logger.error(f"[Updates] Outcome callback error: {e}")
        return True

    def to_dict(self) -> Dict[str, Any]:
        result = self.session.to_dict()
        result.update({
            'success': True,
            'phase': self.phase.value,
            'has_update': self.has_update,
            'update_info': self.availability.to_dict() if self.availability else None,
        })
        return result
