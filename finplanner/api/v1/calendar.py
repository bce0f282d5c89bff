"""GET /v1/calendar/* - financial calendar projections and holidays"""

from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.orm import Session

from finplanner.api.dependencies import get_current_user_id
from finplanner.api.v1.schemas import CalendarResponse, DayProjectionSchema, HolidaySchema, HolidaysResponse
from finplanner.domain.holidays import easter_date, list_holidays
from finplanner.domain.models import DayProjection
from finplanner.domain.projection import project_window, week_window
from finplanner.infrastructure.database.repositories import (
    CreditCardRepository,
    RecurringObligationRepository,
    TransactionRepository,
    card_to_domain,
    recurring_to_domain,
    transaction_to_domain,
)
from finplanner.infrastructure.database.session import get_db
from finplanner.utils.date_utils import month_bounds

router = APIRouter()


def load_projection(db: Session, user_id: str, start: date, end: date) -> List[DayProjection]:
    """Fetch the user's templates, cards and transactions and project [start, end]"""
    obligations = [recurring_to_domain(r) for r in RecurringObligationRepository(db).list_for_user(user_id)]
    cards = [card_to_domain(r) for r in CreditCardRepository(db).list_for_user(user_id)]

    if (start.year, start.month) == (end.year, end.month):
        records = TransactionRepository(db).list_for_user(user_id, year=start.year, month=start.month)
    else:
        records = TransactionRepository(db).list_for_user(user_id)
    transactions = [transaction_to_domain(r) for r in records]

    return project_window(obligations, transactions, cards, start, end)


def to_response(view: str, start: date, end: date, days: List[DayProjection]) -> CalendarResponse:
    return CalendarResponse(
        view=view,
        start=start,
        end=end,
        days=[DayProjectionSchema.model_validate(d) for d in days],
    )


@router.get("/calendar/month", response_model=CalendarResponse)
def month_view(
    year: Optional[int] = Query(None, ge=1, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Every day of a month with its holiday, recurring obligations and
    projected card bills. Defaults to the current month.
    """
    today = date.today()
    start, end = month_bounds(year or today.year, month or today.month)
    return to_response("month", start, end, load_projection(db, user_id, start, end))


@router.get("/calendar/week", response_model=CalendarResponse)
def week_view(
    day: Optional[date] = Query(None, description="Any day inside the week"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Sunday-to-Saturday week; may span two months"""
    try:
        start, end = week_window(day or date.today())
    except OverflowError:
        raise HTTPException(status_code=422, detail="Week falls outside the supported date range")
    return to_response("week", start, end, load_projection(db, user_id, start, end))


@router.get("/calendar/day", response_model=CalendarResponse)
def day_view(
    day: Optional[date] = Query(None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    target = day or date.today()
    return to_response("day", target, target, load_projection(db, user_id, target, target))


@router.get("/calendar/holidays/{year}", response_model=HolidaysResponse)
def holidays(year: int = Path(..., ge=1, le=9999)):
    """National holidays of a year, fixed and Easter-relative"""
    return HolidaysResponse(
        year=year,
        easter=easter_date(year),
        holidays=[HolidaySchema.model_validate(h) for h in list_holidays(year)],
    )
