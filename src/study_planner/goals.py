"""Goal intake workflow: drafts, topics, hours and study routine."""
import logging
from datetime import date, datetime

from study_planner.db import get_connection, row_to_goal, row_to_topic
from study_planner.models import (
    Goal, Topic, GOAL_ACTIVE, GOAL_DRAFT, SOURCE_MANUAL, SOURCE_SUGGESTED, TOPIC_ACTIVE, TOPIC_REMOVED,
)
from study_planner.weekdays import format_weekdays

logger = logging.getLogger(__name__)


class GoalNotFound(LookupError):
    pass


class TopicNotFound(LookupError):
    pass


def _positive_hours(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def create_draft(db_path: str, title: str, deadline: date, today: date) -> Goal:
    """Start a new goal in draft status."""
    if not title or not title.strip():
        raise ValueError("Main subject is required")
    if deadline <= today:
        raise ValueError("Deadline must be in the future")
    conn = get_connection(db_path)
    cursor = conn.execute(
        "INSERT INTO goals (title, deadline, status, created_at) VALUES (?, ?, ?, ?)",
        (title.strip(), deadline.isoformat(), GOAL_DRAFT, datetime.now().isoformat()),
    )
    conn.commit()
    goal_id = cursor.lastrowid
    conn.close()
    logger.info("Created draft goal %s: %s", goal_id, title.strip())
    return get_goal(db_path, goal_id)


def get_goal(db_path: str, goal_id: int) -> Goal:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM goals WHERE id = ?", (goal_id,)).fetchone()
    conn.close()
    if row is None:
        raise GoalNotFound(f"Goal not found: {goal_id}")
    return row_to_goal(row)


def list_goals(db_path: str) -> list[Goal]:
    """All goals, newest first."""
    conn = get_connection(db_path)
    rows = conn.execute("SELECT * FROM goals ORDER BY created_at DESC, id DESC").fetchall()
    conn.close()
    return [row_to_goal(r) for r in rows]


def add_topics(db_path: str, goal_id: int, topics: list[dict]) -> list[Topic]:
    """Replace a goal's topics with the selected entries of ``topics``.

    Each entry carries ``name`` and ``hours`` plus optional ``description``,
    ``selected`` (default True) and ``suggested`` (default False). Positions
    follow input order starting at 1.
    """
    get_goal(db_path, goal_id)
    selected = [t for t in topics if t.get("selected", True)]
    if not selected:
        raise ValueError("Select at least one topic")
    for t in selected:
        if not (t.get("name") or "").strip():
            raise ValueError("Topic name is required")
        if not _positive_hours(t.get("hours")):
            raise ValueError(f"Topic '{t['name']}' needs positive estimated hours")

    logger.info("Adding %d topics to goal %s", len(selected), goal_id)
    conn = get_connection(db_path)
    conn.execute("DELETE FROM topics WHERE goal_id = ?", (goal_id,))
    for position, t in enumerate(selected, 1):
        conn.execute(
            """INSERT INTO topics (goal_id, name, description, estimated_hours, position, source, state)
            VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (
                goal_id, t["name"].strip(), t.get("description") or "", t["hours"], position,
                SOURCE_SUGGESTED if t.get("suggested") else SOURCE_MANUAL, TOPIC_ACTIVE,
            ),
        )
    conn.commit()
    conn.close()
    return get_topics(db_path, goal_id)


def get_topics(db_path: str, goal_id: int) -> list[Topic]:
    """Every topic of a goal, removed ones included, in position order."""
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT * FROM topics WHERE goal_id = ? ORDER BY position, id", (goal_id,)
    ).fetchall()
    conn.close()
    return [row_to_topic(r) for r in rows]


def get_active_topics(db_path: str, goal_id: int) -> list[Topic]:
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT * FROM topics WHERE goal_id = ? AND state = ? ORDER BY position, id",
        (goal_id, TOPIC_ACTIVE),
    ).fetchall()
    conn.close()
    return [row_to_topic(r) for r in rows]


def update_hours(db_path: str, goal_id: int, topic_ids: list[int], hours: list[int]) -> None:
    """Set new hour estimates, matching ``topic_ids`` and ``hours`` by index."""
    if len(topic_ids) != len(hours):
        raise ValueError("Each topic needs exactly one hour value")
    if not all(_positive_hours(h) for h in hours):
        raise ValueError("Estimated hours must be positive")
    logger.info("Updating topic hours for goal %s", goal_id)
    known = {t.id for t in get_topics(db_path, goal_id)}
    for topic_id in topic_ids:
        if topic_id not in known:
            raise TopicNotFound(f"Topic not found: {topic_id}")
    conn = get_connection(db_path)
    conn.executemany(
        "UPDATE topics SET estimated_hours = ? WHERE id = ? AND goal_id = ?",
        [(h, topic_id, goal_id) for topic_id, h in zip(topic_ids, hours)],
    )
    conn.commit()
    conn.close()


def _set_topic_state(db_path: str, topic_id: int, state: str) -> None:
    conn = get_connection(db_path)
    cursor = conn.execute("UPDATE topics SET state = ? WHERE id = ?", (state, topic_id))
    conn.commit()
    conn.close()
    if cursor.rowcount == 0:
        raise TopicNotFound(f"Topic not found: {topic_id}")


def remove_topic(db_path: str, topic_id: int) -> None:
    """Exclude a topic from planning while keeping it for undo."""
    logger.info("Removing topic %s", topic_id)
    _set_topic_state(db_path, topic_id, TOPIC_REMOVED)


def restore_topic(db_path: str, topic_id: int) -> None:
    logger.info("Restoring topic %s", topic_id)
    _set_topic_state(db_path, topic_id, TOPIC_ACTIVE)


def configure_routine(db_path: str, goal_id: int, daily_hours: int, weekdays) -> None:
    """Store the daily hour budget and the allowed weekdays for a goal."""
    if daily_hours is None or daily_hours <= 0:
        raise ValueError("Daily study hours must be positive")
    codes = format_weekdays(weekdays)
    logger.info("Configuring routine for goal %s: %sh/day on %s", goal_id, daily_hours, codes or "no days")
    conn = get_connection(db_path)
    cursor = conn.execute(
        "UPDATE goals SET daily_hours = ?, study_days = ? WHERE id = ?",
        (daily_hours, codes, goal_id),
    )
    conn.commit()
    conn.close()
    if cursor.rowcount == 0:
        raise GoalNotFound(f"Goal not found: {goal_id}")


def activate_goal(db_path: str, goal_id: int) -> None:
    """Mark a scheduled goal as active."""
    conn = get_connection(db_path)
    cursor = conn.execute("UPDATE goals SET status = ? WHERE id = ?", (GOAL_ACTIVE, goal_id))
    conn.commit()
    conn.close()
    if cursor.rowcount == 0:
        raise GoalNotFound(f"Goal not found: {goal_id}")
    logger.info("Goal %s is active", goal_id)


def total_required_hours(db_path: str, goal_id: int) -> int:
    return sum(t.estimated_hours for t in get_active_topics(db_path, goal_id))


def calc_progress(db_path: str, goal_id: int) -> float:
    """Percentage of a goal's sessions that are completed."""
    conn = get_connection(db_path)
    row = conn.execute(
        "SELECT COUNT(*) as t, SUM(completed) as c FROM scheduled_sessions WHERE goal_id = ?",
        (goal_id,),
    ).fetchone()
    conn.close()
    if not row["t"]:
        return 0.0
    return (row["c"] / row["t"]) * 100


def delete_goal(db_path: str, goal_id: int) -> None:
    """Hard-delete a goal with its topics and sessions."""
    logger.info("Deleting goal %s", goal_id)
    get_goal(db_path, goal_id)
    conn = get_connection(db_path)
    conn.execute("DELETE FROM scheduled_sessions WHERE goal_id = ?", (goal_id,))
    conn.execute("DELETE FROM topics WHERE goal_id = ?", (goal_id,))
    conn.execute("DELETE FROM goals WHERE id = ?", (goal_id,))
    conn.commit()
    conn.close()
    logger.info("Goal %s deleted", goal_id)
