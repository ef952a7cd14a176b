#!/usr/bin/env python3
"""
Background jobs for keeping hackathon leaderboards consistent.
Run as cron jobs or scheduled tasks.

Usage:
    python scripts/background_jobs.py reconcile-ranks
    python scripts/background_jobs.py validate-ranks
    python scripts/background_jobs.py system-stats
"""

import sys
import logging
from datetime import datetime
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy.orm import sessionmaker
from app.core.database import engine
from app.services.consistency_manager import ConsistencyManager

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler('background_jobs.log'),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def reconcile_ranks():
    """Periodic job: recompute ranks for every event with leaderboard entries."""
    logger.info("=== STARTING LEADERBOARD RANK RECONCILIATION ===")

    with SessionLocal() as db:
        consistency_manager = ConsistencyManager(db)

        try:
            stats = consistency_manager.reconcile_all_event_ranks()

            logger.info(f"Reconciliation completed:")
            logger.info(f"  Events checked: {stats['total_events']}")
            logger.info(f"  Events updated: {stats['updated_events']}")
            logger.info(f"  Entries updated: {stats['updated_entries']}")
            logger.info(f"  Errors: {stats['errors']}")
            logger.info(f"  Duration: {stats['duration']}")

            return stats['errors'] == 0

        except Exception as e:
            logger.error(f"Fatal error in reconciliation: {e}")
            return False


def validate_ranks():
    """Read-only check that stored ranks match the scores."""
    logger.info("=== STARTING RANK VALIDATION ===")

    with SessionLocal() as db:
        consistency_manager = ConsistencyManager(db)

        try:
            mismatches = consistency_manager.find_rank_mismatches()

            if mismatches:
                logger.warning(f"  {len(mismatches)} entries with stale ranks")
                for issue in mismatches[:5]:  # Log first 5 issues
                    logger.warning(f"    {issue}")
                if len(mismatches) > 5:
                    logger.warning(f"    ... and {len(mismatches) - 5} more")
            else:
                logger.info("  No rank mismatches found")

            return not mismatches

        except Exception as e:
            logger.error(f"Error in rank validation: {e}")
            return False


def show_system_stats():
    """Show current system statistics."""
    logger.info("=== SYSTEM STATISTICS ===")

    with SessionLocal() as db:
        from sqlalchemy import func
        from app.models.event import Event
        from app.models.leaderboard_entry import LeaderboardEntry
        from app.models.profile import Profile

        try:
            total_events = db.query(func.count(Event.id)).scalar()
            total_profiles = db.query(func.count(Profile.id)).scalar()
            total_entries = db.query(func.count(LeaderboardEntry.id)).scalar()
            ranked_events = db.query(func.count(func.distinct(LeaderboardEntry.event_id))).scalar()

            logger.info(f"Events: {total_events} total, {ranked_events} with leaderboard entries")
            logger.info(f"Profiles: {total_profiles} total")
            logger.info(f"Leaderboard entries: {total_entries} total")

            return True

        except Exception as e:
            logger.error(f"Error getting system stats: {e}")
            return False


def main():
    """Main CLI entry point."""
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(1)

    command = sys.argv[1]
    success = False

    start_time = datetime.now()

    if command == "reconcile-ranks":
        success = reconcile_ranks()
    elif command == "validate-ranks":
        success = validate_ranks()
    elif command == "system-stats":
        success = show_system_stats()
    else:
        logger.error(f"Unknown command: {command}")
        print(__doc__)
        sys.exit(1)

    duration = datetime.now() - start_time
    logger.info(f"Command '{command}' completed in {duration}")

    if success:
        logger.info("Job completed successfully")
        sys.exit(0)
    else:
        logger.error("Job failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
