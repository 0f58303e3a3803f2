"""Channel selection and installed-version info from GetState."""

import logging
from typing import Dict, Any, Optional

from ..models.update import InstallInfo

logger = logging.getLogger(__name__)


def _dependency_version(state: Dict[str, Any], name: str) -> Optional[str]:
    dependencies = state.get('dependencies') or {}
    dependency = dependencies.get(name) or {}
    version = dependency.get('version')
    return str(version) if version else None


class InstallInfoService:
    """Read-mostly refreshes; a failed fetch keeps the last known values."""

    def __init__(self, backend, info: InstallInfo):
        self.backend = backend
        self.info = info

    async def fetch_channels(self) -> None:
        try:
            channels = await self.backend.get_user_channels()
            state = await self.backend.get_state()
        except Exception as e:
            logger.error(f"[InstallInfo] Failed to fetch channels: {e}")
            return

        self.info.allowed_channels = list(channels)
        if state.get('channel'):
            self.info.current_channel = str(state['channel'])

    async def set_channel(self, channel: str) -> None:
        """Persist the channel backend-side, then adopt it locally"""
        await self.backend.set_channel(channel)
        self.info.current_channel = channel
        logger.info(f"[InstallInfo] Channel set to {channel}")

    async def fetch_game_version(self) -> None:
        try:
            state = await self.backend.get_state()
        except Exception as e:
            logger.error(f"[InstallInfo] Failed to fetch game version: {e}")
            return
        version = _dependency_version(state, 'game')
        if version:
            self.info.game_version = version

    async def fetch_lkg_version(self) -> None:
        try:
            state = await self.backend.get_state()
        except Exception as e:
            logger.error(f"[InstallInfo] Failed to fetch LKG version: {e}")
            return
        version = _dependency_version(state, 'lkg')
        if version:
            self.info.lkg_version = version

    async def fetch_install_info(self) -> None:
        await self.fetch_channels()
        await self.fetch_game_version()
        await self.fetch_lkg_version()

    def to_dict(self) -> Dict[str, Any]:
        return self.info.to_dict()
