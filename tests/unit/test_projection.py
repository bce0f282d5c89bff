"""Unit tests for calendar projection"""

import pytest
from datetime import date
from decimal import Decimal
from finplanner.domain.exceptions import InvalidRecurringObligationError
from finplanner.domain.models import CreditCard, RecurringObligation, Transaction
from finplanner.domain.projection import (
    card_owns_transaction,
    days_from_range,
    project_bills,
    project_month,
    project_window,
    validate_days_of_month,
    week_window,
)

CARD_PAYMENT = "Cartão de Crédito"


@pytest.fixture
def rent() -> RecurringObligation:
    return RecurringObligation(
        description="Aluguel",
        category="Moradia",
        type="expense",
        value=Decimal("1500.00"),
        days_of_month=[5, 20],
        id="rent",
    )


@pytest.fixture
def card() -> CreditCard:
    return CreditCard(name="Nubank", brand="Mastercard", closing_day=10, id="card-1")


def card_purchase(day: date, value: str, **kwargs) -> Transaction:
    fields = dict(
        date=day,
        description="Compra",
        category="Alimentação",
        type="expense",
        value=Decimal(value),
        payment_method=CARD_PAYMENT,
        card_id="card-1",
    )
    fields.update(kwargs)
    return Transaction(**fields)


def test_validate_days_of_month_sorts_and_dedupes():
    assert validate_days_of_month([20, 5, 5, 31]) == [5, 20, 31]


@pytest.mark.parametrize("days", [[], [0], [32], [5, 40]])
def test_validate_days_of_month_rejects_invalid(days):
    with pytest.raises(InvalidRecurringObligationError):
        validate_days_of_month(days)


def test_days_from_range_crossing_months():
    assert days_from_range(date(2024, 1, 30), date(2024, 2, 2)) == [1, 2, 30, 31]


def test_days_from_range_single_day():
    assert days_from_range(date(2024, 3, 15)) == [15]


def test_days_from_range_end_before_start():
    with pytest.raises(InvalidRecurringObligationError):
        days_from_range(date(2024, 3, 15), date(2024, 3, 1))


def test_project_month_february_obligations(rent: RecurringObligation):
    """Test obligation shows only on its days in a 29-day February"""
    days = project_month([rent], [], [], 2024, 2)

    assert len(days) == 29
    with_rent = [d.date.day for d in days if d.obligations]
    assert with_rent == [5, 20]


def test_project_month_skips_days_missing_from_month():
    """Test day 31 is not remapped in a 30-day month"""
    end_of_month = RecurringObligation(
        description="Internet",
        category="Moradia",
        type="expense",
        value=Decimal("99.90"),
        days_of_month=[31],
    )
    days = project_month([end_of_month], [], [], 2024, 4)

    assert len(days) == 30
    assert all(not d.obligations for d in days)


def test_project_month_marks_holidays():
    days = project_month([], [], [], 2024, 4)

    assert days[20].holiday == "Tiradentes"
    assert days[0].holiday is None


def test_project_bills_sums_card_purchases(card: CreditCard):
    transactions = [
        card_purchase(date(2024, 3, 2), "50.00"),
        card_purchase(date(2024, 3, 25), "75.00"),
        card_purchase(date(2024, 4, 1), "999.00"),
        card_purchase(date(2024, 3, 3), "20.00", payment_method="Pix"),
    ]

    bills = project_bills([card], transactions, 2024, 3)

    assert len(bills) == 1
    assert bills[0].card_id == "card-1"
    assert bills[0].card_name == "Nubank"
    assert bills[0].day == 10
    assert bills[0].amount == Decimal("125.00")


def test_project_bills_matches_card_name_without_id(card: CreditCard):
    """Test purchases without card_id fall back to the card display name"""
    transactions = [
        card_purchase(date(2024, 3, 2), "40.00", card_id=None, card_brand="Nubank"),
        card_purchase(date(2024, 3, 2), "60.00", card_id=None, card_brand="Inter"),
    ]

    bills = project_bills([card], transactions, 2024, 3)

    assert bills[0].amount == Decimal("40.00")


def test_card_owns_transaction_prefers_card_id(card: CreditCard):
    other_card = card_purchase(date(2024, 3, 2), "10.00", card_id="card-2", card_brand="Nubank")
    assert not card_owns_transaction(card, other_card)


def test_project_bills_no_bill_without_spending(card: CreditCard):
    assert project_bills([card], [], 2024, 3) == []
    assert project_bills([], [card_purchase(date(2024, 3, 2), "10.00")], 2024, 3) == []
    assert project_bills([card], [card_purchase(date(2024, 2, 2), "10.00")], 2024, 3) == []


def test_project_month_places_bill_on_closing_day(rent: RecurringObligation, card: CreditCard):
    transactions = [card_purchase(date(2024, 3, 2), "50.00"), card_purchase(date(2024, 3, 25), "75.00")]

    days = project_month([rent], transactions, [card], 2024, 3)

    assert [d.date.day for d in days if d.bills] == [10]
    assert days[9].bills[0].amount == Decimal("125.00")


def test_project_month_is_idempotent(rent: RecurringObligation, card: CreditCard):
    transactions = [card_purchase(date(2024, 3, 2), "50.00")]

    first = project_month([rent], transactions, [card], 2024, 3)
    second = project_month([rent], transactions, [card], 2024, 3)

    assert first == second


def test_closing_day_beyond_month_length_has_no_bill():
    card = CreditCard(name="Inter", closing_day=31, id="card-3")
    transactions = [card_purchase(date(2024, 2, 2), "10.00", card_id="card-3")]

    days = project_month([], transactions, [card], 2024, 2)

    assert all(not d.bills for d in days)


def test_week_window_starts_on_sunday():
    start, end = week_window(date(2024, 5, 1))  # Wednesday

    assert start == date(2024, 4, 28)
    assert end == date(2024, 5, 4)
    assert week_window(date(2024, 4, 28)) == (start, end)


def test_project_window_spans_two_months(rent: RecurringObligation):
    start, end = week_window(date(2024, 5, 1))

    days = project_window([rent], [], [], start, end)

    assert [d.date for d in days][0] == date(2024, 4, 28)
    assert len(days) == 7
    holidays = {d.date: d.holiday for d in days if d.holiday}
    assert holidays == {date(2024, 5, 1): "Dia do Trabalho"}
