from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional


@dataclass(frozen=True)
class FeedArticle:
    """News feed entry pushed by the backend"""
    id: str
    title: str
    description: str
    image_url: Optional[str] = None
    dest_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FeedArticle':
        return cls(
            id=str(data['id']),
            title=str(data.get('title', '')),
            description=str(data.get('description', '')),
            image_url=data.get('image_url') or None,
            dest_url=data.get('dest_url') or None,
        )
