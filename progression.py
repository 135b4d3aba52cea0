"""Level and streak rules applied to user records."""

from datetime import date

XP_PER_LEVEL = 100


def level_for_xp(xp: int) -> int:
    return xp // XP_PER_LEVEL + 1


def next_streak(streak: int, last_activity: date | None, today: date) -> int:
    """
    Streak after activity on ``today``.

    Consecutive days extend the streak, a gap of more than one day restarts
    it at 1, and repeat activity on the same day leaves it unchanged.
    """
    if last_activity is None:
        return 1

    days = (today - last_activity).days
    if days == 1:
        return streak + 1
    if days > 1:
        return 1
    return streak
