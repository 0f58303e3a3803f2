"""Typed events pushed by the backend.

Wire envelope (schema version 1)::

    {"v": 1, "type": "update.status", "seq": 17, "payload": {...}}

``seq`` increases monotonically per backend session. Every payload carries
the complete slice of state it replaces.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .feed import FeedArticle
from .messages import StatusMessage

EVENT_SCHEMA_VERSION = 1


@dataclass(frozen=True)
class BackendEvent:
    seq: int


@dataclass(frozen=True)
class UpdateStatusEvent(BackendEvent):
    status: StatusMessage
    progress: float
    download_progress: Optional[int] = None
    download_total: Optional[int] = None
    download_bps: Optional[float] = None
    can_cancel: bool = True


@dataclass(frozen=True)
class UpdateCompletedEvent(BackendEvent):
    pass


@dataclass(frozen=True)
class UpdateCancelledEvent(BackendEvent):
    pass


@dataclass(frozen=True)
class CancellationFailedEvent(BackendEvent):
    reason: str = ""


@dataclass(frozen=True)
class UpdateFailedEvent(BackendEvent):
    reason: str = ""


@dataclass(frozen=True)
class FeedArticlesEvent(BackendEvent):
    articles: Tuple[FeedArticle, ...] = ()

