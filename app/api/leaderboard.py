"""
Leaderboard API endpoints.
"""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_leaderboard_service
from app.schemas import leaderboard as leaderboard_schemas
from app.services.leaderboard_service import LeaderboardService


router = APIRouter(
    prefix="/leaderboard",
    tags=["leaderboard"],
    responses={404: {"description": "Event or profile not found"}}
)


@router.post("", response_model=leaderboard_schemas.LeaderboardEntryResponse, status_code=201)
def upsert_leaderboard_entry(
        payload: leaderboard_schemas.LeaderboardUpdate,
        db: Session = Depends(get_db),
        service: LeaderboardService = Depends(get_leaderboard_service)
):
    """
    Create or update a participant's score for an event.

    Ranks for every participant in the event are recalculated:
    equal scores share a rank and the next score skips ahead (1, 2, 2, 4).
    """
    return service.upsert(db, payload.event_id, payload.user_id, payload.score)


@router.get("/{event_id}", response_model=List[leaderboard_schemas.LeaderboardRow])
def get_leaderboard(
        event_id: UUID,
        db: Session = Depends(get_db),
        service: LeaderboardService = Depends(get_leaderboard_service)
):
    """
    Get the leaderboard for an event, ordered by rank.

    Each row carries participant display data when it is available.
    """
    return service.get_leaderboard(db, event_id)
