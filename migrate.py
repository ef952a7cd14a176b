"""
Database migration script to set up the initial schema.
"""
import os

from dotenv import load_dotenv
from sqlalchemy import create_engine, text

# Load environment variables
load_dotenv()

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    "sqlite:///./hackathon.db"
)

def run_migrations():
    """Run database migrations."""
    engine = create_engine(DATABASE_URL)

    with engine.connect() as conn:
        # Create tables
        conn.execute(text("""
            CREATE TABLE IF NOT EXISTS profiles (
                id VARCHAR(36) PRIMARY KEY,
                username VARCHAR(50) UNIQUE NOT NULL,
                full_name VARCHAR(100),
                avatar_url VARCHAR(500),
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """))

        conn.execute(text("""
            CREATE TABLE IF NOT EXISTS events (
                id VARCHAR(36) PRIMARY KEY,
                title VARCHAR(200) NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                location VARCHAR(200),
                start_date TIMESTAMP NOT NULL,
                end_date TIMESTAMP NOT NULL,
                max_participants INTEGER,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                CHECK (end_date >= start_date)
            )
        """))

        conn.execute(text("""
            CREATE TABLE IF NOT EXISTS leaderboard (
                id VARCHAR(36) PRIMARY KEY,
                event_id VARCHAR(36) NOT NULL,
                user_id VARCHAR(36) NOT NULL,
                score INTEGER NOT NULL DEFAULT 0 CHECK (score >= 0),
                rank INTEGER NOT NULL DEFAULT 0,
                updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                UNIQUE (event_id, user_id),
                FOREIGN KEY (event_id) REFERENCES events(id) ON DELETE CASCADE,
                FOREIGN KEY (user_id) REFERENCES profiles(id) ON DELETE CASCADE
            )
        """))

        # Create indexes for performance (SQLite-compatible)
        for sql in [
            "CREATE INDEX IF NOT EXISTS idx_leaderboard_event_rank ON leaderboard (event_id, rank);",
            "CREATE INDEX IF NOT EXISTS idx_leaderboard_user ON leaderboard (user_id);",
            "CREATE INDEX IF NOT EXISTS idx_events_start_date ON events (start_date);"
        ]:
            conn.execute(text(sql))

        conn.commit()

    print("Database migrations completed successfully.")


if __name__ == "__main__":
    print("Starting database migration...")

    # Run migrations
    run_migrations()

    print("Migration complete!")
