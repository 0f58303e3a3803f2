"""Typed wrappers for the backend methods the orchestration layer consumes."""

from typing import List, Dict, Any, Optional

from ..errors import BackendCallError
from ..models.account import Account
from .client import BackendClient


class LauncherBackend:
    """One coroutine per backend method; results are converted to local types.

    Every method may raise ``BackendCallError``.
    """

    def __init__(self, client: BackendClient):
        self.client = client

    async def get_state(self) -> Dict[str, Any]:
        state = await self.client.call("GetState")
        return state if isinstance(state, dict) else {}

    async def get_user_channels(self) -> List[str]:
        channels = await self.client.call("GetUserChannels")
        return [str(c) for c in (channels or [])]

    async def set_channel(self, channel: str) -> None:
        await self.client.call("SetChannel", channel=channel)

    async def check_for_updates(self, force: bool) -> int:
        result = await self.client.call("CheckForUpdates", force=force)
        try:
            return int(result)
        except (TypeError, ValueError):
            raise BackendCallError("CheckForUpdates", f"expected status code, got {result!r}")

    async def check_network_mode(self, force: bool, reason: str) -> bool:
        """True means offline"""
        result = await self.client.call("CheckNetworkMode", force=force, reason=reason)
        return result is True

    async def get_account(self) -> Optional[Account]:
        data = await self.client.call("GetAccount")
        if not data:
            return None
        if not isinstance(data, dict):
            raise BackendCallError("GetAccount", f"expected account object, got {type(data).__name__}")
        return Account.from_dict(data)

    async def is_logged_in(self) -> bool:
        return (await self.client.call("IsLoggedIn")) is True

    async def logout(self) -> None:
        await self.client.call("Logout")

    async def set_user_profile(self, uuid: str) -> None:
        await self.client.call("SetUserProfile", uuid=uuid)

    async def refresh_news_feed(self) -> None:
        await self.client.call("RefreshNewsFeed")

    async def apply_updates(self) -> None:
        await self.client.call("ApplyUpdates")

    async def cancel_updates(self) -> None:
        await self.client.call("CancelUpdates")
