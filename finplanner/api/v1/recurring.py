"""Recurring obligation endpoints - monthly templates shown on the calendar"""

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finplanner.api.dependencies import (
    get_current_user_id,
    get_notification_client,
    get_request_id,
    parse_record_id,
)
from finplanner.api.v1.common import invalid_request, not_found, write_failed, write_succeeded
from finplanner.api.v1.schemas import RecurringListResponse, RecurringRequest, RecurringSchema
from finplanner.domain.exceptions import InvalidRecurringObligationError
from finplanner.domain.models import RecurringObligation
from finplanner.domain.projection import days_from_range, validate_days_of_month
from finplanner.infrastructure.clients.notifications import NotificationClient
from finplanner.infrastructure.database.repositories import RecurringObligationRepository, recurring_to_domain
from finplanner.infrastructure.database.session import get_db

router = APIRouter()


def build_obligation(body: RecurringRequest) -> RecurringObligation:
    """
    Obligation from a request; a start/end date range takes precedence over
    an explicit day list and replaces it entirely.

    Raises:
        InvalidRecurringObligationError: No usable day selected
    """
    if body.start_date is not None:
        days = days_from_range(body.start_date, body.end_date)
    else:
        days = validate_days_of_month(body.days_of_month or [])

    return RecurringObligation(
        description=body.description,
        category=body.category,
        type=body.type,
        value=body.value,
        days_of_month=days,
        icon=body.icon,
    )


@router.post("/recurring", response_model=RecurringSchema, status_code=201)
def create_recurring(
    body: RecurringRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    notifier: NotificationClient = Depends(get_notification_client),
):
    request_id = get_request_id(request)
    try:
        obligation = build_obligation(body)
        rec = RecurringObligationRepository(db).create(user_id, obligation)
        db.commit()
    except InvalidRecurringObligationError as e:
        raise invalid_request(db, request_id, e)
    except SQLAlchemyError as e:
        raise write_failed(db, request_id, "recurring", "create", e)

    write_succeeded(background_tasks, notifier, request_id, user_id, "recurring", "create")
    return RecurringSchema.model_validate(recurring_to_domain(rec))


@router.get("/recurring", response_model=RecurringListResponse)
def list_recurring(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    records = RecurringObligationRepository(db).list_for_user(user_id)
    return RecurringListResponse(
        user_id=user_id,
        obligations=[RecurringSchema.model_validate(recurring_to_domain(r)) for r in records],
    )


@router.put("/recurring/{obligation_id}", response_model=RecurringSchema)
def replace_recurring(
    obligation_id: str,
    body: RecurringRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    notifier: NotificationClient = Depends(get_notification_client),
):
    """Destructive replace: every field, including the day list, is overwritten"""
    request_id = get_request_id(request)
    repo = RecurringObligationRepository(db)
    rec = repo.get(user_id, parse_record_id(obligation_id))
    if rec is None:
        raise not_found("Recurring obligation")

    try:
        repo.replace(rec, build_obligation(body))
        db.commit()
    except InvalidRecurringObligationError as e:
        raise invalid_request(db, request_id, e)
    except SQLAlchemyError as e:
        raise write_failed(db, request_id, "recurring", "update", e)

    write_succeeded(background_tasks, notifier, request_id, user_id, "recurring", "update")
    return RecurringSchema.model_validate(recurring_to_domain(rec))


@router.delete("/recurring/{obligation_id}", status_code=204)
def delete_recurring(
    obligation_id: str,
    background_tasks: BackgroundTasks,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    notifier: NotificationClient = Depends(get_notification_client),
):
    """Remove the template; no record of past occurrences remains"""
    request_id = get_request_id(request)
    repo = RecurringObligationRepository(db)
    rec = repo.get(user_id, parse_record_id(obligation_id))
    if rec is None:
        raise not_found("Recurring obligation")

    try:
        repo.delete(rec)
        db.commit()
    except SQLAlchemyError as e:
        raise write_failed(db, request_id, "recurring", "delete", e)

    write_succeeded(background_tasks, notifier, request_id, user_id, "recurring", "delete")
