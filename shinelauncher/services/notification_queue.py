"""Toast notifications shown by the UI, removed after their duration."""

import asyncio
import logging
from dataclasses import dataclass, asdict
from enum import Enum
from typing import List, Dict, Any

logger = logging.getLogger(__name__)


class NotificationType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass
class Notification:
    id: int
    message: str
    type: NotificationType = NotificationType.INFO
    duration: float = 5.0  # seconds, <= 0 keeps it until removed

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['type'] = NotificationType(self.type).value
        return data


class NotificationQueue:
    """Time-boxed toast queue. Ids increase for the lifetime of the queue."""

    def __init__(self, default_duration: float = 5.0):
        self.default_duration = default_duration
        self.notifications: List[Notification] = []
        self._next_id = 0
        self._timers: Dict[int, asyncio.TimerHandle] = {}

    def show(self, message: str, type: NotificationType = NotificationType.INFO, duration: float = None) -> int:
        """Queue a toast; a positive duration requires a running event loop."""
        if duration is None:
            duration = self.default_duration
        type = NotificationType(type)

        self._next_id += 1
        notification_id = self._next_id
        self.notifications.append(Notification(notification_id, message, type, duration))

        if duration > 0:
            loop = asyncio.get_running_loop()
            self._timers[notification_id] = loop.call_later(duration, self.remove, notification_id)

        logger.debug(f"[Notifications] #{notification_id} {type.value}: {message}")
        return notification_id

    def show_success(self, message: str, duration: float = None) -> int:
        return self.show(message, NotificationType.SUCCESS, duration)

    def show_error(self, message: str, duration: float = None) -> int:
        return self.show(message, NotificationType.ERROR, duration)

    def show_info(self, message: str, duration: float = None) -> int:
        return self.show(message, NotificationType.INFO, duration)

    def remove(self, notification_id: int) -> None:
        timer = self._timers.pop(notification_id, None)
        if timer:
            timer.cancel()
        self.notifications = [n for n in self.notifications if n.id != notification_id]

    def clear(self) -> None:
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        self.notifications = []

    def to_list(self) -> List[Dict[str, Any]]:
        return [n.to_dict() for n in self.notifications]
