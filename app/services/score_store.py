"""
SQLAlchemy-backed storage for leaderboard scores.
"""
import logging
from datetime import datetime, timezone
from typing import Dict, List, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import PersistenceError
from app.models.event import Event
from app.models.leaderboard_entry import LeaderboardEntry
from app.models.profile import Profile

logger = logging.getLogger(__name__)


class ScoreStore:
    """
    Row-level operations on the leaderboard table.

    Writes are flushed, never committed: the caller owns the transaction so
    that a score write and the rank rewrite it triggers commit together.
    Every SQLAlchemy failure surfaces as PersistenceError.
    """

    def __init__(self, db: Session):
        self.db = db

    def event_exists(self, event_id: str) -> bool:
        try:
            return self.db.query(Event.id).filter(Event.id == event_id).first() is not None
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to look up event {event_id}: {e}") from e

    def user_exists(self, user_id: str) -> bool:
        try:
            return self.db.query(Profile.id).filter(Profile.id == user_id).first() is not None
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to look up profile {user_id}: {e}") from e

    def upsert_row(self, event_id: str, user_id: str, score: int) -> LeaderboardEntry:
        """Create or overwrite the (event_id, user_id) row with score."""
        try:
            entry = self.db.query(LeaderboardEntry).filter(
                LeaderboardEntry.event_id == event_id,
                LeaderboardEntry.user_id == user_id
            ).with_for_update().first()

            now = datetime.now(timezone.utc)
            if entry:
                entry.score = score
                entry.updated_at = now
            else:
                # Rank is a placeholder until the same transaction recalculates it
                entry = LeaderboardEntry(
                    event_id=event_id,
                    user_id=user_id,
                    score=score,
                    rank=0,
                    updated_at=now
                )
                self.db.add(entry)

            self.db.flush()
            return entry

        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to upsert leaderboard entry: {e}") from e

    def list_rows(self, event_id: str) -> List[Tuple[str, int]]:
        """All (id, score) pairs for an event."""
        try:
            rows = self.db.query(
                LeaderboardEntry.id,
                LeaderboardEntry.score
            ).filter(
                LeaderboardEntry.event_id == event_id
            ).all()
            return [(entry_id, score) for entry_id, score in rows]
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to fetch leaderboard entries: {e}") from e

    def list_entries(self, event_id: str) -> List[LeaderboardEntry]:
        """Entries for an event ordered by rank, ties by id."""
        try:
            return self.db.query(LeaderboardEntry).filter(
                LeaderboardEntry.event_id == event_id
            ).order_by(
                LeaderboardEntry.rank.asc(),
                LeaderboardEntry.id.asc()
            ).all()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to get leaderboard: {e}") from e

    def stored_ranks(self, event_id: str) -> Dict[str, int]:
        try:
            rows = self.db.query(
                LeaderboardEntry.id,
                LeaderboardEntry.rank
            ).filter(
                LeaderboardEntry.event_id == event_id
            ).all()
            return {entry_id: rank for entry_id, rank in rows}
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to fetch leaderboard ranks: {e}") from e

    def batch_update_ranks(self, ranks: Dict[str, int]) -> int:
        """Write id -> rank for every changed row. Returns the number of rows changed."""
        if not ranks:
            return 0

        try:
            entries = self.db.query(LeaderboardEntry).filter(
                LeaderboardEntry.id.in_(list(ranks.keys()))
            ).all()

            now = datetime.now(timezone.utc)
            changed = 0
            for entry in entries:
                new_rank = ranks[entry.id]
                if entry.rank != new_rank:
                    entry.rank = new_rank
                    entry.updated_at = now
                    changed += 1

            self.db.flush()
            return changed

        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to update ranks: {e}") from e

    def event_ids_with_entries(self) -> List[str]:
        try:
            rows = self.db.query(LeaderboardEntry.event_id).distinct().all()
            return [event_id for event_id, in rows]
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to list leaderboard events: {e}") from e

    def refresh(self, entry: LeaderboardEntry) -> LeaderboardEntry:
        try:
            self.db.refresh(entry)
            return entry
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to fetch updated leaderboard entry: {e}") from e

    def commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to commit leaderboard changes: {e}") from e

    def rollback(self) -> None:
        try:
            self.db.rollback()
        except SQLAlchemyError as e:
            logger.error(f"Rollback failed: {e}")
