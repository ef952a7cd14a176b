"""
Participant display data used to enrich leaderboard rows.
"""
import logging
from dataclasses import dataclass, asdict
from typing import Dict, Iterable, Optional

from sqlalchemy.orm import Session

from app.models.profile import Profile

logger = logging.getLogger(__name__)


@dataclass
class DisplayInfo:
    """Minimal public view of a participant"""
    id: str
    username: str
    full_name: Optional[str]
    avatar_url: Optional[str]

    @property
    def display_name(self) -> str:
        return self.full_name or self.username

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["display_name"] = self.display_name
        return data


class ProfileLookup:

    def __init__(self, db: Session):
        self.db = db

    def get_display_info(self, user_id: str) -> Optional[DisplayInfo]:
        return self.get_display_infos([user_id]).get(user_id)

    def get_display_infos(self, user_ids: Iterable[str]) -> Dict[str, DisplayInfo]:
        """Batch lookup; unknown ids are simply missing from the result."""
        ids = list(set(user_ids))
        if not ids:
            return {}

        profiles = self.db.query(
            Profile.id,
            Profile.username,
            Profile.full_name,
            Profile.avatar_url
        ).filter(
            Profile.id.in_(ids)
        ).all()

        return {
            profile_id: DisplayInfo(
                id=profile_id,
                username=username,
                full_name=full_name,
                avatar_url=avatar_url
            )
            for profile_id, username, full_name, avatar_url in profiles
        }
