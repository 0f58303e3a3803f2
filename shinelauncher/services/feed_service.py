"""News feed: refreshed on request, filled only by feed events."""

import logging
from typing import List, Dict, Any

from ..models.events import FeedArticlesEvent
from ..models.feed import FeedArticle

logger = logging.getLogger(__name__)


class NewsFeedService:

    def __init__(self, backend):
        self.backend = backend
        self.articles: List[FeedArticle] = []
        self.last_event_seq = 0

    async def refresh_news_feed(self) -> None:
        """Ask the backend to refresh; articles arrive later as an event"""
        try:
            await self.backend.refresh_news_feed()
        except Exception as e:
            logger.error(f"[Feed] Failed to refresh news feed: {e}")

    def apply(self, event: FeedArticlesEvent) -> bool:
        if event.seq <= self.last_event_seq:
            logger.debug(f"[Feed] Dropping out-of-order feed event seq={event.seq}")
            return False
        self.articles = list(event.articles)
        self.last_event_seq = event.seq
        logger.info(f"[Feed] {len(self.articles)} article(s)")
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {'articles': [a.to_dict() for a in self.articles]}
