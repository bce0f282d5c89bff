"""Savings goal progress tracking"""

from dataclasses import replace
from datetime import date
from decimal import Decimal
from finplanner.domain.models import Goal, GoalContribution

INITIAL_STATUS = "Iniciado"


def apply_contribution(goal: Goal, contribution: GoalContribution) -> Goal:
    """
    Add a contribution to a goal's running total.

    The completion date is stamped with the first contribution that reaches
    the target and kept afterwards; it is cleared if the goal is no longer
    complete.
    """
    current_value = goal.current_value + contribution.amount
    completed = current_value >= goal.target_value

    if not completed:
        completion_date = None
    else:
        completion_date = goal.completion_date or contribution.date

    return replace(
        goal,
        current_value=current_value,
        last_contribution_date=contribution.date,
        completion_date=completion_date,
    )


def progress(goal: Goal) -> Decimal:
    """Percent of the target reached, capped at 100"""
    if goal.target_value <= 0:
        return Decimal("100")
    return min(goal.current_value / goal.target_value * 100, Decimal("100"))


def is_completed(goal: Goal) -> bool:
    return goal.current_value >= goal.target_value


def months_remaining(goal: Goal, today: date) -> int:
    """Whole calendar months until the deadline (0 when past due)"""
    months = (goal.deadline.year - today.year) * 12 + goal.deadline.month - today.month
    return max(months, 0)
