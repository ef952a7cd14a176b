"""
Background consistency jobs for keeping stored leaderboard ranks correct.
"""
import logging
from datetime import datetime
from typing import Dict, Any, List

from sqlalchemy.orm import Session

from app.services.leaderboard_service import LeaderboardService
from app.services.rank_calculator import calculate_ranks
from app.services.score_store import ScoreStore

logger = logging.getLogger(__name__)


class ConsistencyManager:
    """Reconciles stored ranks with ranks recomputed from scores."""

    def __init__(self, db: Session, leaderboard_service: LeaderboardService = None):
        self.db = db
        self.store = ScoreStore(db)
        self.leaderboard_service = leaderboard_service or LeaderboardService()

    def reconcile_all_event_ranks(self) -> Dict[str, Any]:
        """
        Recompute ranks for every event that has leaderboard entries.
        Covers writers in other processes racing on the same event.
        """
        logger.info("Starting leaderboard rank reconciliation")

        stats = {
            "total_events": 0,
            "updated_events": 0,
            "updated_entries": 0,
            "errors": 0,
            "start_time": datetime.now()
        }

        try:
            event_ids = self.store.event_ids_with_entries()
            stats["total_events"] = len(event_ids)

            for event_id in event_ids:
                try:
                    changed = self.leaderboard_service.recalculate_ranks(self.db, event_id)
                    if changed:
                        stats["updated_events"] += 1
                        stats["updated_entries"] += changed
                        logger.debug(f"Event {event_id}: {changed} ranks corrected")
                except Exception as e:
                    stats["errors"] += 1
                    logger.error(f"Error reconciling event {event_id}: {e}")

        except Exception as e:
            logger.error(f"Fatal error in reconciliation: {e}")
            stats["errors"] += 1

        finally:
            stats["end_time"] = datetime.now()
            stats["duration"] = stats["end_time"] - stats["start_time"]

        logger.info(
            f"Reconciliation completed: "
            f"{stats['updated_entries']} entries in {stats['updated_events']} events updated, "
            f"{stats['errors']} errors, "
            f"duration: {stats['duration']}"
        )

        return stats

    def find_rank_mismatches(self) -> List[Dict[str, Any]]:
        """Entries whose stored rank differs from the recomputed rank. Read-only."""
        mismatches = []

        for event_id in self.store.event_ids_with_entries():
            expected = calculate_ranks(self.store.list_rows(event_id))
            stored = self.store.stored_ranks(event_id)

            for entry_id, rank in expected.items():
                if stored.get(entry_id) != rank:
                    mismatches.append({
                        "event_id": event_id,
                        "entry_id": entry_id,
                        "stored_rank": stored.get(entry_id),
                        "expected_rank": rank
                    })

        if mismatches:
            logger.warning(f"Found {len(mismatches)} leaderboard rank mismatches")

        return mismatches
