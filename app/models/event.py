import uuid

from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.database import Base


class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    location = Column(String(200))
    start_date = Column(DateTime(timezone=True), nullable=False, index=True)
    end_date = Column(DateTime(timezone=True), nullable=False)
    max_participants = Column(Integer)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    leaderboard_entries = relationship(
        "LeaderboardEntry",
        back_populates="event",
        cascade="all, delete-orphan"
    )
