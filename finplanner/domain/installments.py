"""Installment expansion for credit purchases paid over several months"""

from dataclasses import replace
from typing import List
from finplanner.domain.exceptions import InvalidInstallmentPlanError
from finplanner.domain.models import Transaction
from finplanner.utils.date_utils import add_months
from finplanner.utils.money import from_cents, to_cents


def expand_installments(purchase: Transaction, total_installments: int) -> List[Transaction]:
    """
    Split one expense into N monthly installment transactions.

    Requirements:
    - One record per month, the first dated on the purchase date
    - Month overflow follows calendar rollover (Jan 31 + 1 month = Mar 3)
    - Last installment absorbs rounding remainder (≤ N-1 cents drift)
    - Description, category, payment method and card copied to every record

    Args:
        purchase: The purchase as entered, with its full value
        total_installments: Number of monthly payments (N > 1)

    Returns:
        N Transactions numbered 1..N sharing the "Nx" installments label

    Example:
        R$ 1000.00 in 3x → [333.33, 333.33, 333.34]
        100000 cents / 3 = 33333 base, remainder 1
        Last installment: 33333 + 1 = 33334
    """
    if total_installments <= 1:
        raise InvalidInstallmentPlanError("Installment plans need more than one installment")
    if purchase.type != "expense":
        raise InvalidInstallmentPlanError("Only expenses can be paid in installments")

    total_cents = to_cents(purchase.value)
    base_amount = total_cents // total_installments
    remainder = total_cents % total_installments
    label = f"{total_installments}x"

    installments = []
    for i in range(total_installments):
        # Last installment absorbs remainder to ensure exact total
        amount = base_amount + (remainder if i == total_installments - 1 else 0)

        installments.append(
            replace(
                purchase,
                id=None,
                date=add_months(purchase.date, i),
                value=from_cents(amount),
                installments=label,
                installment_number=i + 1,
                total_installments=total_installments,
            )
        )

    return installments
