"""Progress dashboard figures per goal."""
from datetime import date

from study_planner.db import get_connection
from study_planner.goals import list_goals
from study_planner.tasks import list_overdue, list_sessions_on


def get_progress_label(pct: float) -> str:
    if pct >= 100:
        return "DONE"
    elif pct >= 65:
        return "ON TRACK"
    elif pct >= 35:
        return "IN PROGRESS"
    return "JUST STARTED"


def get_progress_color(pct: float) -> str:
    if pct >= 100:
        return "green"
    elif pct >= 65:
        return "cyan"
    elif pct >= 35:
        return "yellow"
    return "dark_orange"


def get_goal_stats(db_path: str, goal_id: int, today: date) -> dict:
    conn = get_connection(db_path)
    row = conn.execute(
        """SELECT COUNT(*) as total,
            SUM(completed) as completed,
            SUM(CASE WHEN completed = 0 AND scheduled_date < ? THEN 1 ELSE 0 END) as overdue,
            SUM(duration_minutes) as planned_minutes,
            SUM(CASE WHEN completed = 1 THEN duration_minutes ELSE 0 END) as done_minutes
        FROM scheduled_sessions WHERE goal_id = ?""",
        (today.isoformat(), goal_id),
    ).fetchone()
    conn.close()
    total = row["total"]
    completed = row["completed"] or 0
    progress = round((completed / total) * 100, 1) if total else 0.0
    return {
        "total_sessions": total,
        "completed_sessions": completed,
        "overdue_sessions": row["overdue"] or 0,
        "planned_minutes": row["planned_minutes"] or 0,
        "completed_minutes": row["done_minutes"] or 0,
        "progress": progress,
        "label": get_progress_label(progress),
    }


def get_overview(db_path: str, today: date) -> dict:
    goals = list_goals(db_path)
    return {
        "goals": [{"goal": g, **get_goal_stats(db_path, g.id, today)} for g in goals],
        "today": list_sessions_on(db_path, today),
        "overdue": list_overdue(db_path, today),
    }
