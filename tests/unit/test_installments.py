"""Unit tests for installment expansion"""

import pytest
from datetime import date
from decimal import Decimal
from finplanner.domain.exceptions import InvalidInstallmentPlanError
from finplanner.domain.installments import expand_installments
from finplanner.domain.models import Transaction


def make_purchase(value: str, day: date = date(2024, 1, 15), **kwargs) -> Transaction:
    fields = dict(
        date=day,
        description="Notebook",
        category="Educação",
        type="expense",
        value=Decimal(value),
        payment_method="Cartão de Crédito",
        card_brand="Nubank",
    )
    fields.update(kwargs)
    return Transaction(**fields)


def test_expand_installments_equal_split():
    """Test evenly divisible value"""
    installments = expand_installments(make_purchase("1200.00"), 4)

    assert len(installments) == 4
    assert all(inst.value == Decimal("300.00") for inst in installments)


def test_expand_installments_rounding():
    """Test last installment absorbs remainder"""
    installments = expand_installments(make_purchase("1000.00"), 3)

    assert [inst.value for inst in installments] == [
        Decimal("333.33"),
        Decimal("333.33"),
        Decimal("333.34"),
    ]
    assert sum(inst.value for inst in installments) == Decimal("1000.00")


def test_expand_installments_monthly_dates():
    """Test one installment per month starting on the purchase date"""
    installments = expand_installments(make_purchase("300.00", day=date(2024, 11, 10)), 3)

    assert [inst.date for inst in installments] == [
        date(2024, 11, 10),
        date(2024, 12, 10),
        date(2025, 1, 10),
    ]


def test_expand_installments_month_overflow_rolls_forward():
    """Test Jan 31 + 1 month lands in March instead of being clamped"""
    installments = expand_installments(make_purchase("200.00", day=date(2023, 1, 31)), 2)
    assert installments[1].date == date(2023, 3, 3)

    leap = expand_installments(make_purchase("200.00", day=date(2024, 1, 31)), 2)
    assert leap[1].date == date(2024, 3, 2)


def test_expand_installments_numbering_and_copied_fields():
    """Test label, numbering and fields shared by the group"""
    purchase = make_purchase("90.00", card_id="card-1", id="ignored")
    installments = expand_installments(purchase, 3)

    assert [inst.installment_number for inst in installments] == [1, 2, 3]
    for inst in installments:
        assert inst.installments == "3x"
        assert inst.total_installments == 3
        assert inst.description == "Notebook"
        assert inst.category == "Educação"
        assert inst.payment_method == "Cartão de Crédito"
        assert inst.card_id == "card-1"
        assert inst.card_brand == "Nubank"
        assert inst.id is None


def test_expand_installments_small_value():
    """Test a value smaller than one cent per installment"""
    installments = expand_installments(make_purchase("0.02"), 3)

    assert [inst.value for inst in installments] == [Decimal("0.00"), Decimal("0.00"), Decimal("0.02")]


@pytest.mark.parametrize("count", [1, 0, -2])
def test_expand_installments_requires_more_than_one(count):
    with pytest.raises(InvalidInstallmentPlanError):
        expand_installments(make_purchase("100.00"), count)


def test_expand_installments_rejects_income():
    with pytest.raises(InvalidInstallmentPlanError):
        expand_installments(make_purchase("100.00", type="income"), 3)
