"""Progress of daily and monthly sales goals."""

from __future__ import annotations

import calendar
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from pos_analytics.models import Goal, Transaction
from pos_analytics.periods import resolve_period
from pos_analytics.sales.growth import sales_total
from pos_analytics.utils import safe_percentage, to_number

logger = logging.getLogger(__name__)

DAILY = "daily"
MONTHLY = "monthly"

# Cap so a tiny target does not produce absurd percentages
MAX_PROGRESS_PERCENTAGE = 999.0


@dataclass(frozen=True)
class GoalProgress:
    """Where a goal stands at ``now``.

    Attributes:
        goal: The goal being tracked.
        current_amount: Sales so far in the goal's window.
        progress_percentage: ``current / target * 100``, capped at 999; 0
            when the target is 0.
        is_achieved: ``current >= target``; never True for a zero target.
        hours_remaining: Hours left in the day (daily goals only).
        days_remaining: Days left in the month (monthly goals only).
    """

    goal: Goal
    current_amount: float
    progress_percentage: float
    is_achieved: bool
    hours_remaining: int | None = None
    days_remaining: int | None = None


def goal_progress(goal: Goal, current_amount: float, now: datetime) -> GoalProgress:
    """Compute progress for one goal given the sales in its window.

    Examples:
        >>> goal = Goal(id="g1", goal_type="daily", target_amount=200)
        >>> p = goal_progress(goal, 150, datetime(2025, 1, 15, 18, 30))
        >>> p.progress_percentage, p.is_achieved, p.hours_remaining
        (75.0, False, 6)

    """
    current = to_number(current_amount)
    target = goal.target_amount
    if target > 0:
        progress = min(safe_percentage(current, target), MAX_PROGRESS_PERCENTAGE)
        achieved = current >= target
    else:
        progress, achieved = 0.0, False

    hours_remaining = days_remaining = None
    if goal.goal_type == DAILY:
        hours_remaining = max(0, 24 - now.hour)
    elif goal.goal_type == MONTHLY:
        days_in_month = calendar.monthrange(now.year, now.month)[1]
        days_remaining = max(0, days_in_month - now.day)
    else:
        logger.warning("Goal %s has unknown type %r", goal.id, goal.goal_type)

    return GoalProgress(
        goal=goal,
        current_amount=current,
        progress_percentage=progress,
        is_achieved=achieved,
        hours_remaining=hours_remaining,
        days_remaining=days_remaining,
    )


def goals_progress(
    goals: Iterable[Goal], transactions: Iterable[Transaction], now: datetime
) -> list[GoalProgress]:
    """Progress for every active goal, measured on raw transactions.

    Daily goals count today's sales; monthly goals count the current month
    to date. Goals of any other type are skipped.
    """
    txns = list(transactions)
    windows = {
        DAILY: resolve_period("today", now),
        MONTHLY: resolve_period("this_month", now),
    }
    results = []
    for goal in goals:
        if not goal.is_active:
            continue
        window = windows.get(goal.goal_type)
        if window is None:
            logger.warning("Skipping goal %s with unknown type %r", goal.id, goal.goal_type)
            continue
        results.append(goal_progress(goal, sales_total(txns, window), now))
    return results
