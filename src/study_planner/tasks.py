"""Scheduled session storage and per-session operations."""
import logging
from datetime import date, datetime

from study_planner.db import get_connection, row_to_session
from study_planner.models import ScheduledSession

logger = logging.getLogger(__name__)


class SessionNotFound(LookupError):
    pass


def replace_sessions(db_path: str, goal_id: int, sessions: list[ScheduledSession]) -> int:
    """Swap a goal's whole session set for ``sessions`` in one transaction.

    Returns the number of sessions written. On any failure the previous set
    is left untouched.
    """
    conn = get_connection(db_path)
    try:
        with conn:
            conn.execute("DELETE FROM scheduled_sessions WHERE goal_id = ?", (goal_id,))
            conn.executemany(
                """INSERT INTO scheduled_sessions
                (goal_id, topic_id, scheduled_date, duration_minutes, title, description, completed, completed_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                [
                    (goal_id, s.topic_id, s.scheduled_date.isoformat(), s.duration_minutes,
                     s.title, s.description, int(s.completed), s.completed_at)
                    for s in sessions
                ],
            )
    finally:
        conn.close()
    return len(sessions)


def list_sessions(db_path: str, goal_id: int) -> list[ScheduledSession]:
    """A goal's sessions ordered by scheduled date."""
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT * FROM scheduled_sessions WHERE goal_id = ? ORDER BY scheduled_date, id",
        (goal_id,),
    ).fetchall()
    conn.close()
    return [row_to_session(r) for r in rows]


def list_sessions_between(db_path: str, start: date, end: date) -> list[ScheduledSession]:
    conn = get_connection(db_path)
    rows = conn.execute(
        """SELECT * FROM scheduled_sessions
        WHERE scheduled_date BETWEEN ? AND ?
        ORDER BY scheduled_date, id""",
        (start.isoformat(), end.isoformat()),
    ).fetchall()
    conn.close()
    return [row_to_session(r) for r in rows]


def list_sessions_on(db_path: str, day: date) -> list[ScheduledSession]:
    return list_sessions_between(db_path, day, day)


def list_overdue(db_path: str, today: date) -> list[ScheduledSession]:
    """Open sessions dated before ``today``, oldest first."""
    conn = get_connection(db_path)
    rows = conn.execute(
        """SELECT * FROM scheduled_sessions
        WHERE completed = 0 AND scheduled_date < ?
        ORDER BY scheduled_date, id""",
        (today.isoformat(),),
    ).fetchall()
    conn.close()
    return [row_to_session(r) for r in rows]


def get_session(db_path: str, session_id: int) -> ScheduledSession:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM scheduled_sessions WHERE id = ?", (session_id,)).fetchone()
    conn.close()
    if row is None:
        raise SessionNotFound(f"Session not found: {session_id}")
    return row_to_session(row)


def _update_session(db_path: str, session_id: int, sql: str, params: tuple) -> None:
    conn = get_connection(db_path)
    cursor = conn.execute(sql, params + (session_id,))
    conn.commit()
    conn.close()
    if cursor.rowcount == 0:
        raise SessionNotFound(f"Session not found: {session_id}")


def complete_session(db_path: str, session_id: int, now: datetime | None = None) -> None:
    logger.info("Marking session %s as completed", session_id)
    stamp = (now or datetime.now()).isoformat()
    _update_session(
        db_path, session_id,
        "UPDATE scheduled_sessions SET completed = 1, completed_at = ? WHERE id = ?",
        (stamp,),
    )


def uncomplete_session(db_path: str, session_id: int) -> None:
    logger.info("Clearing completion of session %s", session_id)
    _update_session(
        db_path, session_id,
        "UPDATE scheduled_sessions SET completed = 0, completed_at = NULL WHERE id = ?",
        (),
    )


def reschedule_session(db_path: str, session_id: int, new_date: date) -> None:
    logger.info("Rescheduling session %s to %s", session_id, new_date.isoformat())
    _update_session(
        db_path, session_id,
        "UPDATE scheduled_sessions SET scheduled_date = ? WHERE id = ?",
        (new_date.isoformat(),),
    )
