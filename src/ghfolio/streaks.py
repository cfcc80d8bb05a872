"""Contribution streak calculation."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from ghfolio.models import ContributionDay


@dataclass(frozen=True)
class Streaks:
    """Current and longest runs of consecutive contribution days."""

    current_streak: int = 0
    longest_streak: int = 0


def calculate_streaks(days: Iterable[ContributionDay], today: date | None = None) -> Streaks:
    """Compute contribution streaks from calendar days.

    The current streak walks back from the most recent day, counting days
    with at least one contribution. A zero today is still in progress, so it
    is skipped without breaking the streak; any other zero day ends the
    walk. The longest streak is the longest run of days with at least one
    contribution.

    Args:
        days: Calendar days in any order.
        today: Day treated as in progress (defaults to date.today()).

    Returns:
        Streaks; (0, 0) for no input.
    """
    today_iso = (today or date.today()).isoformat()
    ordered = sorted(days, key=lambda d: d.date, reverse=True)

    current = 0
    longest = 0
    run = 0
    checking_current = True

    for day in ordered:
        if checking_current:
            if day.contribution_count > 0:
                current += 1
            elif day.date != today_iso:
                checking_current = False

        if day.contribution_count > 0:
            run += 1
            longest = max(longest, run)
        else:
            run = 0

    return Streaks(current_streak=current, longest_streak=longest)
