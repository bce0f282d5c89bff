"""GET /v1/summary - monthly cash-flow totals"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from finplanner.api.dependencies import get_current_user_id
from finplanner.api.v1.schemas import MonthlySummarySchema
from finplanner.domain.summary import monthly_summary
from finplanner.infrastructure.database.repositories import (
    GoalRepository,
    TransactionRepository,
    contribution_to_domain,
    transaction_to_domain,
)
from finplanner.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/summary", response_model=MonthlySummarySchema)
def get_monthly_summary(
    year: Optional[int] = Query(None, ge=1, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Income, expense, invested and balance for a month (defaults to the current one)"""
    today = date.today()
    year = year or today.year
    month = month or today.month

    transactions = [
        transaction_to_domain(r) for r in TransactionRepository(db).list_for_user(user_id, year=year, month=month)
    ]
    contributions = [contribution_to_domain(r) for r in GoalRepository(db).list_contributions(user_id)]
    return MonthlySummarySchema.model_validate(monthly_summary(transactions, contributions, year, month))
