"""Account and profile records, backend-side and session-facing."""

from dataclasses import dataclass, field, asdict
from typing import List, Dict, Any, Optional


@dataclass(frozen=True)
class Profile:
    """Profile as reported by the backend"""
    uuid: str
    name: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Profile':
        return cls(uuid=str(data.get('uuid', '')), name=str(data.get('name', '')))


@dataclass(frozen=True)
class UserProfile:
    """Profile as shown to the UI (``name`` is exposed as ``username``)"""
    uuid: str
    username: str

    @classmethod
    def from_profile(cls, profile: Profile) -> 'UserProfile':
        return cls(uuid=profile.uuid, username=profile.name)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Account:
    profiles: List[Profile] = field(default_factory=list)
    selected_profile: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Account':
        return cls(
            profiles=[Profile.from_dict(p) for p in (data.get('profiles') or [])],
            selected_profile=str(data.get('selected_profile') or ''),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AccountSession:
    account: Optional[Account] = None
    profiles: List[UserProfile] = field(default_factory=list)
    selected_profile_uuid: Optional[str] = None

    @property
    def is_logged_in(self) -> bool:
        return self.account is not None

    def clear(self) -> None:
        self.account = None
        self.profiles = []
        self.selected_profile_uuid = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'is_logged_in': self.is_logged_in,
            'profiles': [p.to_dict() for p in self.profiles],
            'selected_profile_uuid': self.selected_profile_uuid,
        }
