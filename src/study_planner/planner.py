"""Split a topic's estimated hours into structured study sessions."""
import math
from fractions import Fraction

from study_planner.models import PlannedSession

# Fundamentals and deepening each take this share of the topic, rounded up.
PHASE_SHARE = Fraction(2, 5)
MAX_SESSION_HOURS = 2

FUNDAMENTALS = "fundamentals"
DEEPENING = "deepening"
REVIEW = "review"

PHASE_TITLES = {
    FUNDAMENTALS: "Fundamentals",
    DEEPENING: "Deepening",
    REVIEW: "Review and Consolidation",
}

PHASE_DESCRIPTIONS = {
    FUNDAMENTALS: "Study of the fundamental concepts and introduction to the topic",
    DEEPENING: "Detailed study and practice of the content",
    REVIEW: "General review and consolidation of what was learned",
}


class InvalidTopicHours(ValueError):
    """Raised when a topic without positive estimated hours is planned."""


def phase_hours(total_hours: int) -> int:
    return math.ceil(total_hours * PHASE_SHARE)


def split_phase(phase_total: int) -> list[int]:
    """Split one phase into sessions of at most MAX_SESSION_HOURS.

    Every session gets ``ceil(phase_total / count)`` hours, capped, except the
    last one, which takes whatever is left so the phase adds up exactly.
    """
    if phase_total <= 0:
        return []
    count = math.ceil(phase_total / MAX_SESSION_HOURS)
    per_session = min(math.ceil(phase_total / count), MAX_SESSION_HOURS)
    hours = [per_session] * (count - 1)
    hours.append(phase_total - per_session * (count - 1))
    return hours


def _phase_sessions(topic_name: str, phase: str, phase_total: int) -> list[PlannedSession]:
    return [
        PlannedSession(
            title=f"{topic_name} - {PHASE_TITLES[phase]} (Part {i})",
            description=PHASE_DESCRIPTIONS[phase],
            hours=hours,
            phase=phase,
        )
        for i, hours in enumerate(split_phase(phase_total), 1)
    ]


def plan_sessions(topic_name: str, total_hours: int) -> list[PlannedSession]:
    """Plan the ordered study sessions for one topic.

    Args:
        topic_name: Display name used as the session title prefix.
        total_hours: Estimated hours for the topic, must be positive.

    Returns:
        Fundamentals sessions, then deepening sessions, then at most one
        review session. Durations are whole hours.
    """
    if total_hours is None or total_hours <= 0:
        raise InvalidTopicHours(f"Topic '{topic_name}' needs positive estimated hours, got {total_hours}")

    fundamentals = phase_hours(total_hours)
    deepening = phase_hours(total_hours)
    # Independent rounding can push the first two phases past the total.
    review = max(0, total_hours - fundamentals - deepening)

    sessions = _phase_sessions(topic_name, FUNDAMENTALS, fundamentals)
    sessions += _phase_sessions(topic_name, DEEPENING, deepening)
    if review > 0:
        sessions.append(PlannedSession(
            title=f"{topic_name} - {PHASE_TITLES[REVIEW]}",
            description=PHASE_DESCRIPTIONS[REVIEW],
            hours=review,
            phase=REVIEW,
        ))
    return sessions


def planned_hours(sessions: list[PlannedSession]) -> int:
    return sum(s.hours for s in sessions)
