"""Session-scoped context: builds every state entity and component once.

Components receive the context's entities by reference; nothing in the
package keeps module-level state.
"""

import logging
from typing import Dict, Any, Optional

from .bridge import BackendClient, LauncherBackend
from .controllers import NetworkModeGate, UpdateLifecycleCoordinator, EventIngestor
from .controllers.update_coordinator import (
    OUTCOME_COMPLETED,
    OUTCOME_CANCELLED,
    OUTCOME_FAILED,
    OUTCOME_CANCEL_FAILED,
)
from .models import UpdateSession, NetworkModeCache, AccountSession, InstallInfo
from .services import AccountSessionManager, InstallInfoService, NewsFeedService, NotificationQueue
from .utils.settings import LauncherSettings

logger = logging.getLogger(__name__)

# i18n keys for toasts raised by update outcomes
OUTCOME_NOTIFICATIONS = {
    OUTCOME_COMPLETED: ('success', 'notifications.updateCompleted'),
    OUTCOME_CANCELLED: ('info', 'notifications.updateCancelled'),
    OUTCOME_FAILED: ('error', 'notifications.updateFailed'),
    OUTCOME_CANCEL_FAILED: ('error', 'notifications.cancellationFailed'),
}


class SessionContext:
    """Owns the launcher's state for the lifetime of the process."""

    def __init__(self, settings: Optional[LauncherSettings] = None, backend=None,
                 client: Optional[BackendClient] = None):
        self.settings = settings or LauncherSettings()

        self.client = client
        if backend is None:
            if self.client is None:
                self.client = BackendClient(self.settings.backend_url, self.settings.call_timeout)
            backend = LauncherBackend(self.client)
        self.backend = backend

        # State entities
        self.update_session = UpdateSession()
        self.network_cache = NetworkModeCache()
        self.account_session = AccountSession()
        self.install_info = InstallInfo()

        # Components
        self.network = NetworkModeGate(self.backend, self.network_cache)
        self.updates = UpdateLifecycleCoordinator(
            self.backend, self.update_session, self.settings.status_codes
        )
        self.account = AccountSessionManager(self.backend, self.account_session)
        self.install = InstallInfoService(self.backend, self.install_info)
        self.feed = NewsFeedService(self.backend)
        self.notifications = NotificationQueue(self.settings.notification_duration)
        self.events = EventIngestor(self.updates, self.feed)

        self.updates.set_outcome_callback(self._on_update_outcome)
        if self.client is not None:
            self.client.set_event_handler(self.events.ingest)

    def _on_update_outcome(self, outcome: str, details: Dict[str, Any]) -> None:
        kind, message = OUTCOME_NOTIFICATIONS.get(outcome, ('info', f'notifications.{outcome}'))
        self.notifications.show(message, kind)

    async def start(self) -> None:
        """Connect to the backend and run the bootstrap refreshes"""
        if self.client is not None:
            await self.client.connect()
        await self.network.check_network_mode(False, "startup")
        await self.account.check_session_info()
        await self.install.fetch_install_info()

    async def stop(self) -> None:
        self.notifications.clear()
        if self.client is not None:
            await self.client.disconnect()

    def snapshot(self) -> Dict[str, Any]:
        return {
            'network': self.network.to_dict(),
            'updates': self.updates.to_dict(),
            'account': self.account.to_dict(),
            'install_info': self.install.to_dict(),
            'feed': self.feed.to_dict(),
            'notifications': self.notifications.to_list(),
        }
