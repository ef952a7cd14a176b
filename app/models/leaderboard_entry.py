import uuid

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.database import Base


class LeaderboardEntry(Base):
    __tablename__ = "leaderboard"
    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_leaderboard_event_user"),
        CheckConstraint("score >= 0", name="ck_leaderboard_score_non_negative"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    score = Column(Integer, nullable=False, default=0)
    rank = Column(Integer, nullable=False, default=0)  # derived, see rank_calculator
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    event = relationship("Event", back_populates="leaderboard_entries")
    user = relationship("Profile", back_populates="leaderboard_entries")
