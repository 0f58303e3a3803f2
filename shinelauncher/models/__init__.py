# State entities and wire models shared by the shinelauncher components

from .messages import StatusMessage, decode_message
from .update import (
    PrimaryAction,
    UpdatePhase,
    UpdateAvailability,
    UpdateSession,
    NetworkModeCache,
    InstallInfo,
)
from .account import Profile, UserProfile, Account, AccountSession
from .feed import FeedArticle
from .events import (
    EVENT_SCHEMA_VERSION,
    BackendEvent,
    UpdateStatusEvent,
    UpdateCompletedEvent,
    UpdateCancelledEvent,
    CancellationFailedEvent,
    UpdateFailedEvent,
    FeedArticlesEvent,
)
