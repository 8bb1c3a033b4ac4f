"""Tests for goal progress."""

import logging
from datetime import datetime

import pytest

from pos_analytics.goals import MAX_PROGRESS_PERCENTAGE, goal_progress, goals_progress
from pos_analytics.models import Goal, parse_transactions

DAILY_GOAL = Goal(id="g-day", goal_type="daily", target_amount=200)
MONTHLY_GOAL = Goal(id="g-month", goal_type="monthly", target_amount=1000)


def test_daily_goal_in_the_evening() -> None:
    progress = goal_progress(DAILY_GOAL, 150, datetime(2025, 1, 15, 18, 30))

    assert progress.progress_percentage == pytest.approx(75.0)
    assert progress.is_achieved is False
    assert progress.hours_remaining == 6
    assert progress.days_remaining is None


def test_monthly_goal_mid_month() -> None:
    progress = goal_progress(MONTHLY_GOAL, 1000, datetime(2025, 1, 15, 9, 0))

    assert progress.days_remaining == 16
    assert progress.hours_remaining is None
    assert progress.is_achieved is True
    assert progress.progress_percentage == pytest.approx(100.0)


def test_zero_target_is_never_achieved() -> None:
    goal = Goal(id="g", goal_type="daily", target_amount=0)
    progress = goal_progress(goal, 500, datetime(2025, 1, 15, 12, 0))
    assert progress.progress_percentage == 0.0
    assert progress.is_achieved is False


def test_progress_is_capped() -> None:
    goal = Goal(id="g", goal_type="daily", target_amount=1)
    progress = goal_progress(goal, 50_000, datetime(2025, 1, 15, 12, 0))
    assert progress.progress_percentage == MAX_PROGRESS_PERCENTAGE
    assert progress.is_achieved is True


def test_last_day_of_month() -> None:
    progress = goal_progress(MONTHLY_GOAL, 0, datetime(2024, 2, 29, 23, 0))
    assert progress.days_remaining == 0


class TestGoalsProgress:
    @pytest.fixture
    def transactions(self, raw_transaction):
        return parse_transactions(
            [
                raw_transaction("today-1", "2025-01-15T09:00:00", 100),
                raw_transaction("today-2", "2025-01-15T13:00:00", 50),
                raw_transaction("earlier", "2025-01-03T13:00:00", 400),
                raw_transaction("december", "2024-12-31T23:00:00", 999),
            ]
        )

    def test_windows(self, transactions, now) -> None:
        results = goals_progress([DAILY_GOAL, MONTHLY_GOAL], transactions, now)

        daily, monthly = results
        assert daily.current_amount == 150.0
        assert daily.progress_percentage == pytest.approx(75.0)
        assert daily.hours_remaining == 10
        assert monthly.current_amount == pytest.approx(550.0)
        assert monthly.progress_percentage == pytest.approx(55.0)

    def test_inactive_and_unknown_goals_are_skipped(
        self, transactions, now, caplog: pytest.LogCaptureFixture
    ) -> None:
        goals = [
            Goal(id="off", goal_type="daily", target_amount=10, is_active=False),
            Goal(id="weekly", goal_type="weekly", target_amount=10),
            DAILY_GOAL,
        ]

        with caplog.at_level(logging.WARNING, logger="pos_analytics.goals"):
            results = goals_progress(goals, transactions, now)

        assert [r.goal.id for r in results] == ["g-day"]
        assert "weekly" in caplog.text
