"""
Account session manager for shinelauncher

Keeps the local view of the logged-in account and its profiles in step with
the backend:
  - load() / check_session_info() refresh it (best effort, never raises)
  - logout() always leaves the session empty
  - set_user_profile() writes to the backend before changing the selection
"""

import logging
from typing import Dict, Any, Optional

from ..errors import UnknownProfileError
from ..models.account import AccountSession, UserProfile

logger = logging.getLogger(__name__)


class AccountSessionManager:
    """Owns ``AccountSession``."""

    def __init__(self, backend, session: AccountSession):
        self.backend = backend
        self.session = session

    @property
    def current_profile(self) -> Optional[UserProfile]:
        """Selected profile, or None if unset or no longer in the list."""
        uuid = self.session.selected_profile_uuid
        if not uuid:
            return None
        for profile in self.session.profiles:
            if profile.uuid == uuid:
                return profile
        return None

    async def load(self) -> None:
        """Refresh the account and profile list from the backend.

        A failed fetch leaves the previous session untouched.
        """
        try:
            account = await self.backend.get_account()
        except Exception as e:
            logger.error(f"[Account] Failed to load account: {e}")
            return

        if account is None:
            logger.info("[Account] Backend reports no account")
            return

        self.session.account = account
        self.session.profiles = [UserProfile.from_profile(p) for p in account.profiles]
        if account.selected_profile:
            self.session.selected_profile_uuid = account.selected_profile
        logger.info(f"[Account] Loaded account with {len(self.session.profiles)} profile(s)")

    async def check_session_info(self) -> bool:
        """Bootstrap entry point: load the account if the backend has a session."""
        try:
            logged_in = await self.backend.is_logged_in()
        except Exception as e:
            logger.error(f"[Account] Failed to check session: {e}")
            return False

        if not logged_in:
            logger.debug("[Account] No active session")
            return False

        await self.load()
        return True

    async def logout(self) -> None:
        """Log out; the local session is cleared even if the backend call raises."""
        try:
            await self.backend.logout()
        finally:
            self.session.clear()
            logger.info("[Account] Session cleared")

    async def set_user_profile(self, uuid: str) -> None:
        """Select a profile from the current list.

        Raises:
            UnknownProfileError: uuid is not one of the session's profiles.
        """
        if not any(p.uuid == uuid for p in self.session.profiles):
            raise UnknownProfileError(f"profile {uuid!r} is not part of the current account")

        await self.backend.set_user_profile(uuid)
        self.session.selected_profile_uuid = uuid
        logger.info(f"[Account] Selected profile {uuid}")

    def to_dict(self) -> Dict[str, Any]:
        result = self.session.to_dict()
        current = self.current_profile
        result['current_profile'] = current.to_dict() if current else None
        return result
