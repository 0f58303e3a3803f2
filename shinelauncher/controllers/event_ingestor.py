"""Parses backend-pushed events and routes them to their owning component.

Malformed, unknown or wrong-version events are logged and dropped; nothing
raised here reaches the transport.
"""

import math
import logging
from typing import Dict, Any, Optional, Callable

from ..models.events import (
    EVENT_SCHEMA_VERSION,
    BackendEvent,
    UpdateStatusEvent,
    UpdateCompletedEvent,
    UpdateCancelledEvent,
    CancellationFailedEvent,
    UpdateFailedEvent,
    FeedArticlesEvent,
)
from ..models.feed import FeedArticle
from ..models.messages import decode_message

logger = logging.getLogger(__name__)


def _optional_int(value) -> Optional[int]:
    return None if value is None else int(value)


def _finite_float(value) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"non-finite number {value!r}")
    return number


def _optional_float(value) -> Optional[float]:
    return None if value is None else _finite_float(value)


def _parse_update_status(seq: int, payload: Dict[str, Any]) -> UpdateStatusEvent:
    return UpdateStatusEvent(
        seq=seq,
        status=decode_message(payload.get('message')),
        progress=_finite_float(payload.get('progress', 0.0)),
        download_progress=_optional_int(payload.get('download_progress')),
        download_total=_optional_int(payload.get('download_total')),
        download_bps=_optional_float(payload.get('download_bps')),
        can_cancel=bool(payload.get('can_cancel', True)),
    )


def _parse_feed_articles(seq: int, payload: Dict[str, Any]) -> FeedArticlesEvent:
    articles = payload.get('articles')
    if not isinstance(articles, list):
        raise ValueError("'articles' must be a list")
    return FeedArticlesEvent(seq=seq, articles=tuple(FeedArticle.from_dict(a) for a in articles))


EVENT_PARSERS: Dict[str, Callable[[int, Dict[str, Any]], BackendEvent]] = {
    'update.status': _parse_update_status,
    'update.completed': lambda seq, payload: UpdateCompletedEvent(seq=seq),
    'update.cancelled': lambda seq, payload: UpdateCancelledEvent(seq=seq),
    'update.cancel_failed': lambda seq, payload: CancellationFailedEvent(seq=seq, reason=str(payload.get('reason', ''))),
    'update.failed': lambda seq, payload: UpdateFailedEvent(seq=seq, reason=str(payload.get('reason', ''))),
    'feed.articles': _parse_feed_articles,
}


def parse_event(data: Dict[str, Any]) -> Optional[BackendEvent]:
    """Turn a wire envelope into a typed event, or None if it is unusable."""
    version = data.get('v')
    if version != EVENT_SCHEMA_VERSION:
        logger.warning(f"[Events] Unsupported event schema version {version!r}")
        return None

    event_type = data.get('type')
    parser = EVENT_PARSERS.get(event_type)
    if parser is None:
        logger.warning(f"[Events] Unknown event type {event_type!r}")
        return None

    seq = data.get('seq')
    if not isinstance(seq, int) or isinstance(seq, bool) or seq <= 0:
        logger.warning(f"[Events] {event_type} has invalid seq {seq!r}")
        return None

    payload = data.get('payload') or {}
    if not isinstance(payload, dict):
        logger.warning(f"[Events] {event_type} payload is not an object")
        return None

    try:
        return parser(seq, payload)
    except (KeyError, TypeError, ValueError, OverflowError, AttributeError) as e:
        logger.warning(f"[Events] Malformed {event_type} payload: {e}")
        return None


class EventIngestor:
    """Entry point for the bridge's event handler."""

    def __init__(self, update_coordinator, feed_service):
        self.update_coordinator = update_coordinator
        self.feed_service = feed_service
        self.received = 0
        self.dropped = 0

    def ingest(self, data: Dict[str, Any]) -> bool:
        """Parse and apply one event. Returns True if it changed state."""
        self.received += 1
        event = parse_event(data)
        if event is None:
            self.dropped += 1
            return False

        if isinstance(event, FeedArticlesEvent):
            applied = self.feed_service.apply(event)
        else:
            applied = self.update_coordinator.apply(event)

        if not applied:
            self.dropped += 1
        return applied
