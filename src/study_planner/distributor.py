"""Place a goal's planned sessions on concrete study dates.

Packing is greedy and forward-only: sessions fill the current date until the
next one would break the daily budget, then the cursor moves to the next
allowed date, even when the current one is still empty, and never returns to
earlier ones. A session longer than the budget therefore sits alone on the
date after the one it would have overflowed.
"""
import logging
from datetime import date, timedelta

from study_planner.dates import study_dates
from study_planner.feasibility import evaluate_goal
from study_planner.goals import activate_goal, get_goal, get_active_topics
from study_planner.models import DistributionResult, Goal, ScheduledSession, Topic
from study_planner.planner import plan_sessions
from study_planner.tasks import replace_sessions

logger = logging.getLogger(__name__)


class SchedulingImpossible(Exception):
    """No study date is left between tomorrow and the deadline."""


def order_topics(topics: list[Topic]) -> list[Topic]:
    """Active topics, heaviest first, ties by their position in the goal."""
    return sorted((t for t in topics if t.is_active), key=lambda t: (-t.estimated_hours, t.position))


def distribute(goal: Goal, topics: list[Topic], today: date) -> DistributionResult:
    """Build the dated sessions for a goal without touching storage.

    Sessions start the day after ``today``. If the dates run out, placement
    stops and ``unplaced`` counts every session that did not get a date.
    """
    if not goal.daily_hours or goal.daily_hours <= 0:
        raise ValueError(f"Goal {goal.id} has no positive daily study hours")

    dates = iter(study_dates(today + timedelta(days=1), goal.deadline, goal.weekdays))
    current = next(dates, None)
    if current is None:
        raise SchedulingImpossible(
            "No study dates available before the deadline. Adjust your routine or deadline."
        )

    plans = [(topic, plan_sessions(topic.name, topic.estimated_hours)) for topic in order_topics(topics)]
    remaining = sum(len(sessions) for _, sessions in plans)

    result = DistributionResult(goal_id=goal.id)
    used = 0
    for topic, sessions in plans:
        for planned in sessions:
            if used + planned.hours > goal.daily_hours:
                current = next(dates, None)
                used = 0
                if current is None:
                    result.unplaced = remaining
                    logger.warning(
                        "Ran out of study dates for goal %s, %d sessions left unplaced",
                        goal.id, remaining,
                    )
                    return result
                logger.debug("Goal %s: moving on to %s", goal.id, current.isoformat())
            result.sessions.append(ScheduledSession(
                id=None,
                goal_id=goal.id,
                topic_id=topic.id,
                scheduled_date=current,
                duration_minutes=planned.hours * 60,
                title=planned.title,
                description=planned.description,
            ))
            used += planned.hours
            remaining -= 1
    return result


def distribute_goal(db_path: str, goal_id: int, today: date) -> DistributionResult:
    """Recompute a goal's schedule and replace its stored sessions.

    The new set is computed first; existing sessions are only swapped out
    once it is ready, so a failed run keeps the previous schedule.
    """
    goal = get_goal(db_path, goal_id)
    result = distribute(goal, get_active_topics(db_path, goal_id), today)
    replace_sessions(db_path, goal_id, result.sessions)
    logger.info("Distribution for goal %s done: %d sessions created", goal_id, result.placed)
    return result


def finalize_goal(db_path: str, goal_id: int, today: date, force: bool = False) -> DistributionResult:
    """Check feasibility, build the schedule and mark the goal active.

    An infeasible goal raises ValueError with the shortfall unless ``force``
    is set, in which case whatever fits before the deadline is scheduled.
    """
    report = evaluate_goal(db_path, goal_id, today)
    if not report.feasible and not force:
        raise ValueError(
            f"Not enough time: {report.hours_short}h short. Adjust your routine or remove some topics."
        )
    result = distribute_goal(db_path, goal_id, today)
    activate_goal(db_path, goal_id)
    logger.info("Finalized goal %s", goal_id)
    return result
