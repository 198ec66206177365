"""Data classes for the study planner domain model."""
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

GOAL_DRAFT = "draft"
GOAL_ACTIVE = "active"

TOPIC_ACTIVE = "active"
TOPIC_REMOVED = "removed"

SOURCE_MANUAL = "manual"
SOURCE_SUGGESTED = "suggested"


@dataclass
class Goal:
    id: int
    title: str
    deadline: date
    daily_hours: Optional[int] = None
    weekdays: frozenset = frozenset()
    status: str = GOAL_DRAFT
    created_at: Optional[str] = None


@dataclass
class Topic:
    id: int
    goal_id: int
    name: str
    estimated_hours: int
    position: int = 0
    description: str = ""
    source: str = SOURCE_MANUAL
    state: str = TOPIC_ACTIVE

    @property
    def is_active(self) -> bool:
        return self.state == TOPIC_ACTIVE


@dataclass
class ScheduledSession:
    id: Optional[int]
    goal_id: int
    topic_id: int
    scheduled_date: date
    duration_minutes: int
    title: str
    description: str = ""
    completed: bool = False
    completed_at: Optional[str] = None

    def is_overdue(self, today: date) -> bool:
        """A session is overdue when it is still open and dated before today."""
        return not self.completed and self.scheduled_date < today


@dataclass
class PlannedSession:
    """One undated study block produced for a topic, measured in whole hours."""
    title: str
    description: str
    hours: int
    phase: str


@dataclass
class FeasibilityReport:
    feasible: bool
    required_hours: int
    available_hours: int
    available_days: int
    hours_short: int = 0
    suggested_removals: list = field(default_factory=list)


@dataclass
class DistributionResult:
    goal_id: int
    sessions: list = field(default_factory=list)
    unplaced: int = 0

    @property
    def placed(self) -> int:
        return len(self.sessions)

    @property
    def complete(self) -> bool:
        return self.unplaced == 0
