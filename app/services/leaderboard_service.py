"""
Leaderboard scoring: upsert a score, re-rank the whole event, serve ranked lists.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.cache_config import CacheKeys, CacheTTL
from app.core.exceptions import EventNotFound, ProfileNotFound
from app.models.leaderboard_entry import LeaderboardEntry
from app.services.ephemeral_cache import EphemeralCache
from app.services.profile_lookup import ProfileLookup
from app.services.rank_calculator import calculate_ranks
from app.services.score_store import ScoreStore
from app.services.validators import score_validator
from app.utils.locks import KeyedLocks

logger = logging.getLogger(__name__)


class LeaderboardService:
    """
    Every write recomputes ranks for the entire event, O(n log n) in the
    number of participants. Events hold tens to low hundreds of entries.

    Concurrency policy: writes to one event are serialized by a per-event
    lock in this process, and the score write plus the rank rewrite share a
    single database transaction. A failure at any step rolls back both, so a
    new score is never committed with stale ranks. Writers in other processes
    are not covered by the lock; ConsistencyManager.reconcile_all_event_ranks
    is the reconciling pass for that case.
    """

    def __init__(
        self,
        cache: Optional[EphemeralCache] = None,
        store_factory: Callable[[Session], ScoreStore] = ScoreStore,
        profile_lookup_factory: Callable[[Session], ProfileLookup] = ProfileLookup
    ):
        self.cache = cache
        self.store_factory = store_factory
        self.profile_lookup_factory = profile_lookup_factory
        self.event_locks = KeyedLocks()

    def upsert(self, db: Session, event_id: Any, user_id: Any, score: Any) -> LeaderboardEntry:
        """
        Create or update the score for (event_id, user_id) and re-rank the event.

        Returns the entry with its final rank.

        Raises:
            ValidationError: malformed ids or a score that is not a non-negative int
            EventNotFound / ProfileNotFound: the event or participant does not exist
            PersistenceError: the score store failed; nothing was committed
        """
        event_id = score_validator.validate_identifier(event_id, "event_id")
        user_id = score_validator.validate_identifier(user_id, "user_id")
        score = score_validator.validate_score(score)

        store = self.store_factory(db)

        # Reject writes for unknown events instead of creating orphaned rows
        if not store.event_exists(event_id):
            raise EventNotFound(f"Event {event_id} not found")
        if not store.user_exists(user_id):
            raise ProfileNotFound(f"Profile {user_id} not found")

        with self.event_locks.hold(event_id):
            try:
                entry = store.upsert_row(event_id, user_id, score)
                changed = self._rerank(store, event_id)
                store.commit()
            except Exception:
                store.rollback()
                raise

        entry = store.refresh(entry)
        self._invalidate(event_id)

        logger.info(
            f"Score {score} recorded for user {user_id} in event {event_id}: "
            f"rank={entry.rank}, {changed} ranks changed"
        )
        return entry

    def get_leaderboard(self, db: Session, event_id: Any) -> List[Dict[str, Any]]:
        """
        All entries for an event ordered by rank ascending, ties by entry id,
        each with participant display data under "user".

        An event without entries yields an empty list.
        """
        event_id = score_validator.validate_identifier(event_id, "event_id")

        if self.cache is None:
            return self._load_leaderboard(db, event_id)

        return self.cache.get_or_compute(
            CacheKeys.leaderboard(event_id),
            lambda: self._load_leaderboard(db, event_id),
            ttl=CacheTTL.LEADERBOARD
        )

    def recalculate_ranks(self, db: Session, event_id: Any) -> int:
        """Recompute and persist ranks for one event. Returns the number of rows changed."""
        event_id = score_validator.validate_identifier(event_id, "event_id")
        store = self.store_factory(db)

        with self.event_locks.hold(event_id):
            try:
                changed = self._rerank(store, event_id)
                store.commit()
            except Exception:
                store.rollback()
                raise

        if changed:
            self._invalidate(event_id)
            logger.info(f"Recalculated event {event_id}: {changed} ranks changed")
        return changed

    def _rerank(self, store: ScoreStore, event_id: str) -> int:
        ranks = calculate_ranks(store.list_rows(event_id))
        return store.batch_update_ranks(ranks)

    def _load_leaderboard(self, db: Session, event_id: str) -> List[Dict[str, Any]]:
        entries = self.store_factory(db).list_entries(event_id)
        rows = [
            {
                "id": entry.id,
                "event_id": entry.event_id,
                "user_id": entry.user_id,
                "score": entry.score,
                "rank": entry.rank,
                "updated_at": entry.updated_at,
            }
            for entry in entries
        ]
        if not rows:
            return rows

        try:
            infos = self.profile_lookup_factory(db).get_display_infos(
                row["user_id"] for row in rows
            )
        except Exception as e:
            # Display data is optional; serve the ranks without it
            logger.warning(f"Profile lookup failed for event {event_id} leaderboard: {e}")
            infos = {}

        for row in rows:
            info = infos.get(row["user_id"])
            row["user"] = info.to_dict() if info else None

        return rows

    def _invalidate(self, event_id: str) -> None:
        if self.cache is not None:
            self.cache.invalidate(CacheKeys.leaderboard(event_id))
