"""Enumerate the calendar dates a learner can study on."""
from datetime import date, timedelta


class StudyDates:
    """Dates from ``start`` to ``end`` (inclusive) falling on allowed weekdays.

    Iteration is lazy and starts over on every ``iter()`` call, so the same
    object can be counted and then walked for placement.
    """

    def __init__(self, start: date, end: date, weekdays):
        self.start = start
        self.end = end
        self.weekdays = frozenset(weekdays)

    def __iter__(self):
        if not self.weekdays:
            return
        current = self.start
        while current <= self.end:
            if current.weekday() in self.weekdays:
                yield current
            current += timedelta(days=1)

    def __repr__(self):
        return f"StudyDates({self.start.isoformat()}..{self.end.isoformat()}, {sorted(self.weekdays)})"


def study_dates(start: date, end: date, weekdays) -> StudyDates:
    return StudyDates(start, end, weekdays)


def count_study_days(start: date, end: date, weekdays) -> int:
    return sum(1 for _ in study_dates(start, end, weekdays))
