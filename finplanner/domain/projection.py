"""Recurring-obligation and credit-card bill projection for the financial calendar"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, List, Optional
from finplanner.config import settings
from finplanner.domain.exceptions import InvalidRecurringObligationError
from finplanner.domain.holidays import holidays_for_year, month_day_key
from finplanner.domain.models import (
    CreditCard,
    DayProjection,
    ProjectedBill,
    RecurringObligation,
    Transaction,
)
from finplanner.utils.date_utils import days_in_month, generate_date_range, iter_months, week_start


def validate_days_of_month(days: Iterable[int]) -> List[int]:
    """Return sorted unique days, rejecting empty sets and days outside 1..31"""
    unique = sorted(set(days))
    if not unique:
        raise InvalidRecurringObligationError("At least one day of the month must be selected")
    invalid = [d for d in unique if d < 1 or d > 31]
    if invalid:
        raise InvalidRecurringObligationError(f"Invalid days of month: {invalid}")
    return unique


def days_from_range(start: date, end: Optional[date] = None) -> List[int]:
    """
    Derive days_of_month from a user-chosen date range (inclusive).

    A range crossing a month boundary contributes the days of both months,
    e.g. Jan 30 - Feb 2 gives [1, 2, 30, 31].
    """
    end = end or start
    if end < start:
        raise InvalidRecurringObligationError("End date must not be before start date")
    return validate_days_of_month(d.day for d in generate_date_range(start, end))


def card_owns_transaction(card: CreditCard, txn: Transaction) -> bool:
    """
    Explicit card_id reference when present; otherwise a best-guess match of
    the stored card display name against the card's name.
    """
    if txn.card_id is not None:
        return txn.card_id == card.id
    return txn.card_brand is not None and txn.card_brand == card.name


def project_bills(
    cards: List[CreditCard],
    transactions: List[Transaction],
    year: int,
    month: int,
) -> List[ProjectedBill]:
    """
    Estimate each card's statement for the viewed month.

    Sums credit-card transactions of the card dated inside the month; a card
    with a positive total yields one bill on its closing day.
    """
    if not cards or not transactions:
        return []

    bills = []
    for card in cards:
        total = sum(
            (
                t.value
                for t in transactions
                if t.payment_method == settings.credit_card_payment_method
                and card_owns_transaction(card, t)
                and t.date.year == year
                and t.date.month == month
            ),
            Decimal("0"),
        )
        if total > 0:
            bills.append(
                ProjectedBill(card_id=card.id, card_name=card.name, day=card.closing_day, amount=total)
            )
    return bills


def project_month(
    obligations: List[RecurringObligation],
    transactions: List[Transaction],
    cards: List[CreditCard],
    year: int,
    month: int,
) -> List[DayProjection]:
    """
    One DayProjection per day of the month.

    Obligations appear on the days listed in days_of_month; days the month
    does not have (e.g. 31 in February) are skipped, never remapped.
    """
    bills = project_bills(cards, transactions, year, month)
    holidays = holidays_for_year(year)

    days = []
    for day_number in range(1, days_in_month(year, month) + 1):
        day = date(year, month, day_number)
        days.append(
            DayProjection(
                date=day,
                holiday=holidays.get(month_day_key(day)),
                obligations=[o for o in obligations if day_number in o.days_of_month],
                bills=[b for b in bills if b.day == day_number],
            )
        )
    return days


def project_window(
    obligations: List[RecurringObligation],
    transactions: List[Transaction],
    cards: List[CreditCard],
    start: date,
    end: date,
) -> List[DayProjection]:
    """Month projections narrowed to the days inside [start, end]"""
    result = []
    for year, month in iter_months(start, end):
        result.extend(
            d for d in project_month(obligations, transactions, cards, year, month)
            if start <= d.date <= end
        )
    return result


def week_window(day: date) -> tuple[date, date]:
    """Sunday-to-Saturday week containing day"""
    start = week_start(day)
    return start, start + timedelta(days=6)
