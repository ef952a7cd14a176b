from pydantic import BaseModel, Field, StrictInt
from typing import Optional
from datetime import datetime
from uuid import UUID


class LeaderboardUpdate(BaseModel):
    event_id: UUID = Field(..., description="Event the score belongs to")
    user_id: UUID = Field(..., description="Participant profile id")
    score: StrictInt = Field(..., ge=0, description="Non-negative integer score")


class ParticipantInfo(BaseModel):
    id: str
    username: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    display_name: str


class LeaderboardEntryResponse(BaseModel):
    id: str
    event_id: str
    user_id: str
    score: int
    rank: int
    updated_at: datetime

    class Config:
        from_attributes = True


class LeaderboardRow(LeaderboardEntryResponse):
    user: Optional[ParticipantInfo] = None
