"""UI-callable surface of the launcher orchestration layer.

Every public coroutine returns a JSON-serializable dict. Failed actions
return ``{'success': False, 'error': '<i18n key>'}`` and raise an error toast.
"""

import logging
from typing import Dict, Any, Optional

from .context import SessionContext
from .errors import BackendCallError, UpdateNotCancellableError, UnknownProfileError
from .utils import LauncherSettings, configure_logging, read_log_tail, ensure_data_dir

logger = logging.getLogger(__name__)


class Plugin:

    def __init__(self, context: Optional[SessionContext] = None):
        self.context = context

    async def _main(self):
        if self.context is None:
            ensure_data_dir()
            settings = LauncherSettings.load()
            configure_logging(settings.log_level)
            self.context = SessionContext(settings)

        logger.info("[INIT] Starting launcher session")
        try:
            await self.context.start()
        except BackendCallError as e:
            # Startup continues offline; every refresh is retried on demand
            logger.error(f"[INIT] Backend unavailable at startup: {e}")
            await self.context.network.check_network_mode(True, "startup-failed")
        logger.info("[INIT] Launcher session ready")

    async def _unload(self):
        """Cleanup on unload"""
        if self.context:
            await self.context.stop()
        logger.info("[UNLOAD] Launcher session closed")

    def _fail(self, error_key: str, exc: Exception) -> Dict[str, Any]:
        logger.error(f"[Plugin] {error_key}: {exc}")
        self.context.notifications.show_error(error_key)
        return {'success': False, 'error': error_key}

    # ── Network ──────────────────────────────────────────────────────

    async def check_network_mode(self, force: bool = False, reason: str = "") -> Dict[str, Any]:
        await self.context.network.check_network_mode(force, reason)
        return {'success': True, **self.context.network.to_dict()}

    # ── Updates ──────────────────────────────────────────────────────

    async def check_for_updates(self, force: bool = False) -> Dict[str, Any]:
        try:
            await self.context.updates.check_for_updates(force)
        except BackendCallError as e:
            return self._fail('errors.updateCheckFailed', e)
        return self.context.updates.to_dict()

    async def check_for_launcher_update(self) -> Dict[str, Any]:
        required = await self.context.updates.check_for_launcher_update()
        return {'success': True, 'launcher_update_required': required}

    async def apply_updates(self) -> Dict[str, Any]:
        try:
            await self.context.updates.apply_updates()
        except BackendCallError as e:
            return self._fail('errors.updateStartFailed', e)
        return self.context.updates.to_dict()

    async def cancel_updates(self) -> Dict[str, Any]:
        try:
            await self.context.updates.cancel_updates()
        except UpdateNotCancellableError as e:
            logger.warning(f"[Plugin] Rejected cancel request: {e}")
            return {'success': False, 'error': 'errors.updateNotCancellable'}
        except BackendCallError as e:
            return self._fail('errors.cancelRequestFailed', e)
        return self.context.updates.to_dict()

    async def get_update_status(self) -> Dict[str, Any]:
        return self.context.updates.to_dict()

    # ── Install info / channels ──────────────────────────────────────

    async def fetch_install_info(self) -> Dict[str, Any]:
        await self.context.install.fetch_install_info()
        return {'success': True, **self.context.install.to_dict()}

    async def set_channel(self, channel: str) -> Dict[str, Any]:
        try:
            await self.context.install.set_channel(channel)
        except BackendCallError as e:
            return self._fail('errors.setChannelFailed', e)
        return {'success': True, **self.context.install.to_dict()}

    # ── Account ──────────────────────────────────────────────────────

    async def check_session_info(self) -> Dict[str, Any]:
        logged_in = await self.context.account.check_session_info()
        return {'success': True, 'logged_in': logged_in, **self.context.account.to_dict()}

    async def load_account(self) -> Dict[str, Any]:
        await self.context.account.load()
        return {'success': True, **self.context.account.to_dict()}

    async def logout(self) -> Dict[str, Any]:
        try:
            await self.context.account.logout()
        except BackendCallError as e:
            # Local session is already cleared
            logger.warning(f"[Plugin] Backend logout failed: {e}")
        return {'success': True, **self.context.account.to_dict()}

    async def set_user_profile(self, uuid: str) -> Dict[str, Any]:
        try:
            await self.context.account.set_user_profile(uuid)
        except UnknownProfileError as e:
            logger.warning(f"[Plugin] Rejected profile selection: {e}")
            return {'success': False, 'error': 'errors.unknownProfile'}
        except BackendCallError as e:
            return self._fail('errors.setProfileFailed', e)
        return {'success': True, **self.context.account.to_dict()}

    # ── Feed / notifications / diagnostics ───────────────────────────

    async def refresh_news_feed(self) -> Dict[str, Any]:
        await self.context.feed.refresh_news_feed()
        return {'success': True, **self.context.feed.to_dict()}

    async def get_news_feed(self) -> Dict[str, Any]:
        return {'success': True, **self.context.feed.to_dict()}

    async def get_notifications(self) -> Dict[str, Any]:
        return {'success': True, 'notifications': self.context.notifications.to_list()}

    async def dismiss_notification(self, notification_id: int) -> Dict[str, Any]:
        self.context.notifications.remove(notification_id)
        return {'success': True}

    async def get_state(self) -> Dict[str, Any]:
        return {'success': True, **self.context.snapshot()}

    async def get_log_tail(self, lines: int = 200) -> Dict[str, Any]:
        return {'success': True, 'log': read_log_tail(lines)}
