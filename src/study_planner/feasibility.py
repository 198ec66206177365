"""Check whether a goal's topics fit its deadline and study routine."""
import logging
from datetime import date

from study_planner.dates import count_study_days
from study_planner.goals import get_goal, get_active_topics
from study_planner.models import FeasibilityReport, Goal, Topic

logger = logging.getLogger(__name__)


def required_hours(topics: list[Topic]) -> int:
    return sum(t.estimated_hours for t in topics if t.is_active)


def suggest_removals(topics: list[Topic], hours_short: int) -> list[int]:
    """Pick the biggest active topics until their hours cover the shortfall.

    Topics are taken in descending hour order; equal hours keep their
    original order. The suggestion is advisory and touches nothing.
    """
    ranked = sorted((t for t in topics if t.is_active), key=lambda t: t.estimated_hours, reverse=True)
    suggestion = []
    removed = 0
    for topic in ranked:
        if removed >= hours_short:
            break
        suggestion.append(topic.id)
        removed += topic.estimated_hours
    return suggestion


def check_feasibility(goal: Goal, topics: list[Topic], today: date) -> FeasibilityReport:
    """Compare the hours a goal needs with the hours its routine provides.

    Available days are counted from ``today`` through the deadline, both
    inclusive, on the goal's allowed weekdays.
    """
    needed = required_hours(topics)
    days = count_study_days(today, goal.deadline, goal.weekdays)
    available = days * (goal.daily_hours or 0)

    report = FeasibilityReport(
        feasible=available >= needed,
        required_hours=needed,
        available_hours=available,
        available_days=days,
    )
    if not report.feasible:
        report.hours_short = needed - available
        report.suggested_removals = suggest_removals(topics, report.hours_short)
        logger.warning(
            "Goal %s is %sh short (%sh needed, %sh available)",
            goal.id, report.hours_short, needed, available,
        )
    return report


def evaluate_goal(db_path: str, goal_id: int, today: date) -> FeasibilityReport:
    """Load a goal and its active topics and check feasibility."""
    return check_feasibility(get_goal(db_path, goal_id), get_active_topics(db_path, goal_id), today)
