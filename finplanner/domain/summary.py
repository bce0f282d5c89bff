"""Monthly cash-flow summary"""

from decimal import Decimal
from typing import Dict, List
from finplanner.config import settings
from finplanner.domain.models import GoalContribution, MonthlySummary, Transaction


def _in_month(day, year: int, month: int) -> bool:
    return day.year == year and day.month == month


def is_investment(txn: Transaction) -> bool:
    return txn.type == "investment" or txn.category == settings.investment_category


def monthly_summary(
    transactions: List[Transaction],
    contributions: List[GoalContribution],
    year: int,
    month: int,
) -> MonthlySummary:
    """
    Income, expense and invested totals for one month.

    Invested counts investment transactions plus goal contributions; an
    investment recorded as an expense also counts toward expense.
    """
    zero = Decimal("0")
    monthly = [t for t in transactions if _in_month(t.date, year, month)]

    income = sum((t.value for t in monthly if t.type == "income"), zero)
    expense = sum((t.value for t in monthly if t.type == "expense"), zero)
    invested = sum((t.value for t in monthly if is_investment(t)), zero)
    invested += sum((c.amount for c in contributions if _in_month(c.date, year, month)), zero)

    by_category: Dict[str, Decimal] = {}
    for txn in monthly:
        if txn.type == "expense":
            by_category[txn.category] = by_category.get(txn.category, zero) + txn.value

    return MonthlySummary(
        year=year,
        month=month,
        income=income,
        expense=expense,
        invested=invested,
        balance=income - expense,
        expenses_by_category=dict(sorted(by_category.items(), key=lambda kv: kv[1], reverse=True)),
    )
