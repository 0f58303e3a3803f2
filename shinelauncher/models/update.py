"""State entities for update checks, update sessions and install info."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Any, Optional

from .messages import StatusMessage, CheckingForUpdates, Empty


class PrimaryAction(str, Enum):
    INSTALL = "Install"


class UpdatePhase(str, Enum):
    IDLE = "idle"
    CHECKING = "checking"
    UP_TO_DATE = "up_to_date"
    UPDATE_AVAILABLE = "update_available"
    APPLYING = "applying"
    CANCELLING = "cancelling"


@dataclass(frozen=True)
class UpdateAvailability:
    """Suggested next action when the last check found an update"""
    primary_action: PrimaryAction = PrimaryAction.INSTALL
    game_version: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'primary_action': self.primary_action.value,
            'game_version': self.game_version,
        }


@dataclass
class UpdateSession:
    """In-progress view of an update operation.

    Progress and status are replaced wholesale by backend status events.
    ``last_event_seq`` is the sequence number of the newest event applied.
    """
    status: StatusMessage = field(default_factory=CheckingForUpdates)
    progress: float = 0.0
    download_progress: Optional[int] = None
    download_total: Optional[int] = None
    download_bytes_per_second: Optional[float] = None
    is_running: bool = False
    is_cancelling: bool = False
    can_cancel: bool = True
    cancellation_status: StatusMessage = field(default_factory=Empty)
    last_event_seq: int = 0

    @property
    def is_downloading(self) -> bool:
        return self.download_total is not None

    def clear_download(self) -> None:
        self.download_progress = None
        self.download_total = None
        self.download_bytes_per_second = None

    def finish(self, status: StatusMessage) -> None:
        """Leave the running state; both flags drop together."""
        self.is_running = False
        self.is_cancelling = False
        self.can_cancel = True
        self.status = status
        self.clear_download()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'status': self.status.to_dict(),
            'progress': self.progress,
            'download_progress': self.download_progress,
            'download_total': self.download_total,
            'download_bps': self.download_bytes_per_second,
            'is_running': self.is_running,
            'is_cancelling': self.is_cancelling,
            'can_cancel': self.can_cancel,
            'cancellation_status': self.cancellation_status.to_dict(),
        }


@dataclass
class NetworkModeCache:
    is_offline: bool = False
    has_been_checked: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {'is_offline': self.is_offline, 'has_been_checked': self.has_been_checked}


@dataclass
class InstallInfo:
    """Channel selection and installed versions as reported by GetState"""
    current_channel: str = ""
    allowed_channels: List[str] = field(default_factory=list)
    game_version: Optional[str] = None
    lkg_version: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'current_channel': self.current_channel,
            'allowed_channels': list(self.allowed_channels),
            'game_version': self.game_version,
            'lkg_version': self.lkg_version,
        }
