"""Cached offline/online verdict backed by the backend reachability probe."""

import logging
from typing import Dict, Any

from ..models.update import NetworkModeCache

logger = logging.getLogger(__name__)


class NetworkModeGate:
    """Decides whether the launcher is operating offline.

    The probe result is cached; only ``force=True`` re-probes once a verdict
    exists. A failed probe counts as offline.
    """

    def __init__(self, backend, cache: NetworkModeCache):
        self.backend = backend
        self.cache = cache

    @property
    def is_offline(self) -> bool:
        return self.cache.is_offline

    async def check_network_mode(self, force: bool = False, reason: str = "") -> None:
        if not force and self.cache.has_been_checked:
            logger.debug(f"[NetworkMode] Using cached verdict offline={self.cache.is_offline} (reason={reason!r})")
            return

        try:
            offline = await self.backend.check_network_mode(force, reason)
        except Exception as e:
            logger.error(f"[NetworkMode] Probe failed, assuming offline: {e}")
            offline = True

        self.cache.is_offline = offline is True
        self.cache.has_been_checked = True
        logger.info(f"[NetworkMode] offline={self.cache.is_offline} (force={force}, reason={reason!r})")

    def to_dict(self) -> Dict[str, Any]:
        return self.cache.to_dict()
