"""
Tests for UpdateLifecycleCoordinator: checks, apply, cancel and event merging.
"""
import asyncio

import pytest
from unittest.mock import AsyncMock, Mock

from shinelauncher.controllers.update_coordinator import UpdateLifecycleCoordinator
from shinelauncher.errors import BackendCallError, UpdateNotCancellableError
from shinelauncher.models.events import (
    UpdateStatusEvent,
    UpdateCompletedEvent,
    UpdateCancelledEvent,
    UpdateFailedEvent,
    CancellationFailedEvent,
)
from shinelauncher.models.messages import (
    Empty,
    CancellingUpdates,
    DownloadingFiles,
    UpdateCompleted,
    UpdatesCancelled,
    CancellationFailed,
)
from shinelauncher.models.update import UpdateSession, UpdateAvailability, PrimaryAction, UpdatePhase
from shinelauncher.utils.settings import UpdateStatusCodes


@pytest.fixture
def mock_backend():
    return Mock(
        check_for_updates=AsyncMock(return_value=0),
        apply_updates=AsyncMock(return_value=None),
        cancel_updates=AsyncMock(return_value=None),
    )


@pytest.fixture
def coordinator(mock_backend):
    return UpdateLifecycleCoordinator(mock_backend, UpdateSession())


def status_event(seq, progress=0.5, can_cancel=True, **kwargs):
    return UpdateStatusEvent(
        seq=seq,
        status=DownloadingFiles(file_name="client.jar"),
        progress=progress,
        can_cancel=can_cancel,
        **kwargs,
    )


# ── check_for_updates ────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_zero_code_clears_availability(coordinator, mock_backend):
    coordinator.availability = UpdateAvailability()
    mock_backend.check_for_updates.return_value = 0

    result = await coordinator.check_for_updates()

    assert result is None
    assert coordinator.has_update is False
    assert coordinator.phase == UpdatePhase.UP_TO_DATE


@pytest.mark.asyncio
@pytest.mark.parametrize("code", [1, 2, 7, -1])
async def test_nonzero_code_means_install(coordinator, mock_backend, code):
    mock_backend.check_for_updates.return_value = code

    await coordinator.check_for_updates(force=True)

    mock_backend.check_for_updates.assert_awaited_once_with(True)
    assert coordinator.availability == UpdateAvailability(primary_action=PrimaryAction.INSTALL, game_version=None)
    assert coordinator.phase == UpdatePhase.UPDATE_AVAILABLE


@pytest.mark.asyncio
async def test_check_failure_propagates_and_keeps_state(coordinator, mock_backend):
    coordinator.availability = UpdateAvailability()
    mock_backend.check_for_updates.side_effect = BackendCallError("CheckForUpdates", "timed out")

    with pytest.raises(BackendCallError):
        await coordinator.check_for_updates()

    assert coordinator.availability == UpdateAvailability()


@pytest.mark.asyncio
async def test_stale_check_response_is_dropped(coordinator, mock_backend):
    loop = asyncio.get_running_loop()
    first_reply = loop.create_future()
    second_reply = loop.create_future()
    replies = [first_reply, second_reply]

    async def check(force):
        return await replies.pop(0)

    mock_backend.check_for_updates.side_effect = check

    first = asyncio.create_task(coordinator.check_for_updates())
    second = asyncio.create_task(coordinator.check_for_updates())
    await asyncio.sleep(0)
    assert coordinator.phase == UpdatePhase.CHECKING

    second_reply.set_result(0)
    await second
    first_reply.set_result(1)
    await first

    assert coordinator.availability is None


@pytest.mark.asyncio
async def test_check_sent_before_completion_does_not_restore_update(coordinator, mock_backend):
    reply = asyncio.get_running_loop().create_future()

    async def check(force):
        return await reply

    await coordinator.apply_updates()
    mock_backend.check_for_updates.side_effect = check
    pending = asyncio.create_task(coordinator.check_for_updates())
    await asyncio.sleep(0)

    coordinator.apply(UpdateCompletedEvent(seq=1))
    reply.set_result(1)
    await pending

    assert coordinator.availability is None
    assert coordinator.phase != UpdatePhase.UPDATE_AVAILABLE


@pytest.mark.asyncio
async def test_superseded_check_failure_is_not_raised(coordinator, mock_backend):
    loop = asyncio.get_running_loop()
    first_reply = loop.create_future()
    second_reply = loop.create_future()
    replies = [first_reply, second_reply]

    async def check(force):
        return await replies.pop(0)

    mock_backend.check_for_updates.side_effect = check

    first = asyncio.create_task(coordinator.check_for_updates())
    second = asyncio.create_task(coordinator.check_for_updates())
    await asyncio.sleep(0)

    second_reply.set_result(1)
    await second
    first_reply.set_exception(BackendCallError("CheckForUpdates", "down"))

    assert await first == UpdateAvailability(primary_action=PrimaryAction.INSTALL)
    assert coordinator.has_update is True


@pytest.mark.asyncio
async def test_custom_status_codes(mock_backend):
    coordinator = UpdateLifecycleCoordinator(
        mock_backend, UpdateSession(), UpdateStatusCodes(no_update=-1, launcher_update=5)
    )
    mock_backend.check_for_updates.return_value = 0
    await coordinator.check_for_updates()
    assert coordinator.has_update is True

    mock_backend.check_for_updates.return_value = 5
    assert await coordinator.check_for_launcher_update() is True


# ── check_for_launcher_update ────────────────────────────────────────

@pytest.mark.asyncio
@pytest.mark.parametrize("code,expected", [(2, True), (0, False), (1, False), (3, False)])
async def test_launcher_update_code(coordinator, mock_backend, code, expected):
    mock_backend.check_for_updates.return_value = code

    assert await coordinator.check_for_launcher_update() is expected
    mock_backend.check_for_updates.assert_awaited_once_with(True)


@pytest.mark.asyncio
async def test_launcher_update_check_failure_is_false(coordinator, mock_backend):
    mock_backend.check_for_updates.side_effect = BackendCallError("CheckForUpdates", "down")

    assert await coordinator.check_for_launcher_update() is False


@pytest.mark.asyncio
async def test_launcher_check_does_not_touch_availability(coordinator, mock_backend):
    mock_backend.check_for_updates.return_value = 2
    await coordinator.check_for_launcher_update()

    assert coordinator.availability is None


# ── apply_updates ────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_apply_sets_running_without_polling(coordinator, mock_backend):
    await coordinator.apply_updates()

    assert coordinator.session.is_running is True
    assert coordinator.phase == UpdatePhase.APPLYING
    mock_backend.apply_updates.assert_awaited_once()
    mock_backend.check_for_updates.assert_not_awaited()


@pytest.mark.asyncio
async def test_apply_failure_rolls_back(coordinator, mock_backend):
    mock_backend.apply_updates.side_effect = BackendCallError("ApplyUpdates", "busy")

    with pytest.raises(BackendCallError):
        await coordinator.apply_updates()

    assert coordinator.session.is_running is False


@pytest.mark.asyncio
async def test_apply_while_running_is_ignored(coordinator, mock_backend):
    await coordinator.apply_updates()
    await coordinator.apply_updates()

    mock_backend.apply_updates.assert_awaited_once()


# ── cancel_updates ───────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_cancel_sets_flags_and_requests_once(coordinator, mock_backend):
    await coordinator.apply_updates()

    await coordinator.cancel_updates()
    await coordinator.cancel_updates()

    mock_backend.cancel_updates.assert_awaited_once()
    assert coordinator.session.is_cancelling is True
    assert coordinator.session.cancellation_status == CancellingUpdates()
    assert coordinator.phase == UpdatePhase.CANCELLING


@pytest.mark.asyncio
async def test_cancel_without_running_update_is_rejected(coordinator, mock_backend):
    with pytest.raises(UpdateNotCancellableError):
        await coordinator.cancel_updates()

    mock_backend.cancel_updates.assert_not_awaited()
    assert coordinator.session.is_cancelling is False


@pytest.mark.asyncio
async def test_cancel_rejected_when_phase_not_cancellable(coordinator, mock_backend):
    await coordinator.apply_updates()
    coordinator.apply(status_event(seq=1, can_cancel=False))

    with pytest.raises(UpdateNotCancellableError):
        await coordinator.cancel_updates()

    mock_backend.cancel_updates.assert_not_awaited()
    assert coordinator.session.is_cancelling is False


@pytest.mark.asyncio
async def test_cancel_request_failure_rolls_back(coordinator, mock_backend):
    await coordinator.apply_updates()
    mock_backend.cancel_updates.side_effect = BackendCallError("CancelUpdates", "lost")

    with pytest.raises(BackendCallError):
        await coordinator.cancel_updates()

    assert coordinator.session.is_cancelling is False
    assert coordinator.session.cancellation_status == Empty()
    assert coordinator.session.is_running is True


@pytest.mark.asyncio
async def test_cancelled_event_clears_both_flags(coordinator):
    await coordinator.apply_updates()
    await coordinator.cancel_updates()

    assert coordinator.apply(UpdateCancelledEvent(seq=1)) is True

    session = coordinator.session
    assert (session.is_running, session.is_cancelling) == (False, False)
    assert session.status == UpdatesCancelled()
    assert session.cancellation_status == Empty()
    assert coordinator.phase == UpdatePhase.IDLE


@pytest.mark.asyncio
async def test_cancel_failed_event_keeps_update_running(coordinator):
    await coordinator.apply_updates()
    await coordinator.cancel_updates()

    coordinator.apply(CancellationFailedEvent(seq=1, reason="commit in progress"))

    assert coordinator.session.is_running is True
    assert coordinator.session.is_cancelling is False
    assert coordinator.session.cancellation_status == CancellationFailed(reason="commit in progress")


# ── apply(event) ─────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_status_event_replaces_progress_slice(coordinator):
    await coordinator.apply_updates()
    coordinator.apply(status_event(seq=1, progress=0.25, download_progress=512, download_total=2048, download_bps=128.0))
    coordinator.apply(status_event(seq=2, progress=0.75))

    session = coordinator.session
    assert session.progress == 0.75
    assert session.download_progress is None
    assert session.download_total is None
    assert session.status == DownloadingFiles(file_name="client.jar")


def test_progress_is_clamped(coordinator):
    coordinator.apply(status_event(seq=1, progress=1.7))
    assert coordinator.session.progress == 1.0

    coordinator.apply(status_event(seq=2, progress=-0.3))
    assert coordinator.session.progress == 0.0


def test_out_of_order_events_are_dropped(coordinator):
    coordinator.apply(status_event(seq=5, progress=0.9))

    assert coordinator.apply(status_event(seq=3, progress=0.1)) is False
    assert coordinator.apply(status_event(seq=5, progress=0.2)) is False
    assert coordinator.session.progress == 0.9


@pytest.mark.asyncio
async def test_completed_event_finishes_run(coordinator, mock_backend):
    mock_backend.check_for_updates.return_value = 1
    await coordinator.check_for_updates()
    await coordinator.apply_updates()
    coordinator.apply(status_event(seq=1, download_total=100, download_progress=50))

    coordinator.apply(UpdateCompletedEvent(seq=2))

    session = coordinator.session
    assert session.is_running is False
    assert session.is_cancelling is False
    assert session.progress == 1.0
    assert session.status == UpdateCompleted()
    assert session.is_downloading is False
    assert coordinator.availability is None


@pytest.mark.asyncio
async def test_event_during_failed_apply_is_not_rolled_back(coordinator, mock_backend):
    async def failing_apply():
        coordinator.apply(status_event(seq=1))
        raise BackendCallError("ApplyUpdates", "reply lost")

    mock_backend.apply_updates.side_effect = failing_apply

    with pytest.raises(BackendCallError):
        await coordinator.apply_updates()

    assert coordinator.session.is_running is True


def test_outcome_callback(coordinator):
    outcomes = []
    coordinator.set_outcome_callback(lambda outcome, details: outcomes.append((outcome, details)))

    coordinator.apply(status_event(seq=1))
    coordinator.apply(UpdateFailedEvent(seq=2, reason="disk full"))

    assert outcomes == [("failed", {'reason': "disk full"})]


def test_outcome_callback_errors_are_contained(coordinator):
    coordinator.set_outcome_callback(Mock(side_effect=RuntimeError("no loop")))

    assert coordinator.apply(UpdateCompletedEvent(seq=1)) is True


def test_to_dict_shape(coordinator):
    result = coordinator.to_dict()

    assert result['success'] is True
    assert result['phase'] == 'idle'
    assert result['has_update'] is False
    assert result['update_info'] is None
    assert result['status'] == {'label': 'update_status.checking_for_updates', 'values': {}}
    assert result['cancellation_status'] == {'label': '', 'values': {}}
