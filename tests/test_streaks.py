"""Tests for contribution streak calculation."""

from datetime import date

from ghfolio.models import ContributionDay
from ghfolio.streaks import Streaks, calculate_streaks


def _days(*counts: tuple[str, int]) -> list[ContributionDay]:
    return [ContributionDay(date=d, contribution_count=c) for d, c in counts]


class TestCalculateStreaks:
    """Tests for calculate_streaks."""

    def test_empty(self) -> None:
        """Test no days yields zero streaks."""
        assert calculate_streaks([], today=date(2025, 1, 3)) == Streaks(0, 0)

    def test_recent_run(self) -> None:
        """Test a run ending today."""
        days = _days(("2025-01-03", 2), ("2025-01-02", 1), ("2025-01-01", 0))

        result = calculate_streaks(days, today=date(2025, 1, 3))

        assert result.current_streak == 2
        assert result.longest_streak == 2

    def test_input_order_irrelevant(self) -> None:
        """Test days are sorted before walking."""
        days = _days(("2025-01-01", 0), ("2025-01-03", 2), ("2025-01-02", 1))

        assert calculate_streaks(days, today=date(2025, 1, 3)) == Streaks(2, 2)

    def test_today_without_contributions(self) -> None:
        """Test a zero today does not break a streak running through yesterday."""
        days = _days(("2025-01-03", 0), ("2025-01-02", 4), ("2025-01-01", 1))

        result = calculate_streaks(days, today=date(2025, 1, 3))

        assert result.current_streak == 2
        assert result.longest_streak == 2

    def test_broken_streak(self) -> None:
        """Test a zero day before today ends the current streak."""
        days = _days(
            ("2025-01-06", 1),
            ("2025-01-05", 0),
            ("2025-01-04", 1),
            ("2025-01-03", 1),
            ("2025-01-02", 1),
            ("2025-01-01", 0),
        )

        result = calculate_streaks(days, today=date(2025, 1, 6))

        assert result.current_streak == 1
        assert result.longest_streak == 3

    def test_no_contributions(self) -> None:
        """Test a calendar with only zero days."""
        days = _days(("2025-01-02", 0), ("2025-01-01", 0))

        assert calculate_streaks(days, today=date(2025, 1, 5)) == Streaks(0, 0)

    def test_today_zero_then_gap(self) -> None:
        """Test a zero today followed by a zero yesterday yields no current streak."""
        days = _days(("2025-01-03", 0), ("2025-01-02", 0), ("2025-01-01", 5))

        result = calculate_streaks(days, today=date(2025, 1, 3))

        assert result.current_streak == 0
        assert result.longest_streak == 1
