import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.models.profile import Profile

logger = logging.getLogger(__name__)


class ProfileService:

    def create_profile(self, db: Session, username: str, full_name: Optional[str] = None,
                       avatar_url: Optional[str] = None) -> Profile:
        """Create a participant profile."""
        # Check if username already exists
        existing = db.query(Profile).filter(Profile.username == username).first()
        if existing:
            return existing  # Return existing profile instead of error

        profile = Profile(username=username, full_name=full_name, avatar_url=avatar_url)
        db.add(profile)
        db.commit()
        db.refresh(profile)

        logger.info(f"Created profile {profile.id} with username '{username}'")
        return profile


profile_service_obj = ProfileService()
