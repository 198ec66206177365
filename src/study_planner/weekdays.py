"""Weekday code parsing for study routines.

Routines are stored as comma-separated three-letter codes such as
``"SEG,QUA,SEX"``. Both the Portuguese codes the intake form uses and the
English abbreviations are accepted. Values are ``date.weekday()`` integers.
"""

WEEKDAY_CODES = {
    "SEG": 0, "TER": 1, "QUA": 2, "QUI": 3, "SEX": 4, "SAB": 5, "DOM": 6,
    "MON": 0, "TUE": 1, "WED": 2, "THU": 3, "FRI": 4, "SAT": 5, "SUN": 6,
}

# Codes written back to storage, one per weekday.
CANONICAL_CODES = ("SEG", "TER", "QUA", "QUI", "SEX", "SAB", "DOM")


def parse_weekdays(text: str | None) -> frozenset:
    """Map a code string to a set of weekday numbers.

    Unknown codes are dropped silently, so a string with no valid code yields
    an empty set rather than an error.
    """
    if not text:
        return frozenset()
    days = set()
    for part in text.split(","):
        code = part.strip().upper()
        if code in WEEKDAY_CODES:
            days.add(WEEKDAY_CODES[code])
    return frozenset(days)


def format_weekdays(weekdays) -> str:
    return ",".join(CANONICAL_CODES[d] for d in sorted(set(weekdays)) if 0 <= d < 7)
