"""Database initialization, connection management and row conversion."""
import sqlite3
from datetime import date
from pathlib import Path

from study_planner.config import DB_PATH
from study_planner.models import Goal, Topic, ScheduledSession
from study_planner.weekdays import parse_weekdays

DEFAULT_DB_PATH = DB_PATH

SCHEMA = """
CREATE TABLE IF NOT EXISTS goals (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    deadline TEXT NOT NULL,
    daily_hours INTEGER,
    study_days TEXT DEFAULT '',
    status TEXT NOT NULL DEFAULT 'draft',
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS topics (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    goal_id INTEGER NOT NULL REFERENCES goals(id) ON DELETE CASCADE,
    name TEXT NOT NULL,
    description TEXT DEFAULT '',
    estimated_hours INTEGER NOT NULL CHECK (estimated_hours > 0),
    position INTEGER NOT NULL DEFAULT 0,
    source TEXT NOT NULL DEFAULT 'manual',
    state TEXT NOT NULL DEFAULT 'active'
);

CREATE TABLE IF NOT EXISTS scheduled_sessions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    goal_id INTEGER NOT NULL REFERENCES goals(id) ON DELETE CASCADE,
    topic_id INTEGER NOT NULL REFERENCES topics(id) ON DELETE CASCADE,
    scheduled_date TEXT NOT NULL,
    duration_minutes INTEGER NOT NULL CHECK (duration_minutes > 0),
    title TEXT NOT NULL,
    description TEXT DEFAULT '',
    completed INTEGER NOT NULL DEFAULT 0,
    completed_at TEXT
);

CREATE INDEX IF NOT EXISTS idx_sessions_goal_date ON scheduled_sessions (goal_id, scheduled_date);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory and foreign keys enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating all tables if they don't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()


def row_to_goal(row: sqlite3.Row) -> Goal:
    return Goal(
        id=row["id"],
        title=row["title"],
        deadline=date.fromisoformat(row["deadline"]),
        daily_hours=row["daily_hours"],
        weekdays=parse_weekdays(row["study_days"]),
        status=row["status"],
        created_at=row["created_at"],
    )


def row_to_topic(row: sqlite3.Row) -> Topic:
    return Topic(
        id=row["id"],
        goal_id=row["goal_id"],
        name=row["name"],
        estimated_hours=row["estimated_hours"],
        position=row["position"],
        description=row["description"] or "",
        source=row["source"],
        state=row["state"],
    )


def row_to_session(row: sqlite3.Row) -> ScheduledSession:
    return ScheduledSession(
        id=row["id"],
        goal_id=row["goal_id"],
        topic_id=row["topic_id"],
        scheduled_date=date.fromisoformat(row["scheduled_date"]),
        duration_minutes=row["duration_minutes"],
        title=row["title"],
        description=row["description"] or "",
        completed=bool(row["completed"]),
        completed_at=row["completed_at"],
    )
