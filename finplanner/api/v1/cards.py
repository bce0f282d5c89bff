"""Credit card endpoints"""

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finplanner.api.dependencies import (
    get_current_user_id,
    get_notification_client,
    get_request_id,
    parse_record_id,
)
from finplanner.api.v1.common import not_found, write_failed, write_succeeded
from finplanner.api.v1.schemas import CardListResponse, CardRequest, CardSchema
from finplanner.domain.models import CreditCard
from finplanner.infrastructure.clients.notifications import NotificationClient
from finplanner.infrastructure.database.repositories import CreditCardRepository, card_to_domain
from finplanner.infrastructure.database.session import get_db

router = APIRouter()


def build_card(body: CardRequest) -> CreditCard:
    return CreditCard(
        name=body.name,
        brand=body.brand,
        closing_day=body.closing_day,
        limit=body.limit,
        color=body.color,
    )


@router.post("/cards", response_model=CardSchema, status_code=201)
def create_card(
    body: CardRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    notifier: NotificationClient = Depends(get_notification_client),
):
    request_id = get_request_id(request)
    try:
        rec = CreditCardRepository(db).create(user_id, build_card(body))
        db.commit()
    except SQLAlchemyError as e:
        raise write_failed(db, request_id, "card", "create", e)

    write_succeeded(background_tasks, notifier, request_id, user_id, "card", "create")
    return CardSchema.model_validate(card_to_domain(rec))


@router.get("/cards", response_model=CardListResponse)
def list_cards(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    records = CreditCardRepository(db).list_for_user(user_id)
    return CardListResponse(user_id=user_id, cards=[CardSchema.model_validate(card_to_domain(r)) for r in records])


@router.put("/cards/{card_id}", response_model=CardSchema)
def update_card(
    card_id: str,
    body: CardRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    notifier: NotificationClient = Depends(get_notification_client),
):
    request_id = get_request_id(request)
    repo = CreditCardRepository(db)
    rec = repo.get(user_id, parse_record_id(card_id))
    if rec is None:
        raise not_found("Credit card")

    try:
        repo.update(rec, build_card(body))
        db.commit()
    except SQLAlchemyError as e:
        raise write_failed(db, request_id, "card", "update", e)

    write_succeeded(background_tasks, notifier, request_id, user_id, "card", "update")
    return CardSchema.model_validate(card_to_domain(rec))


@router.delete("/cards/{card_id}", status_code=204)
def delete_card(
    card_id: str,
    background_tasks: BackgroundTasks,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    notifier: NotificationClient = Depends(get_notification_client),
):
    """Delete a card; purchases charged to it stay in the ledger"""
    request_id = get_request_id(request)
    repo = CreditCardRepository(db)
    rec = repo.get(user_id, parse_record_id(card_id))
    if rec is None:
        raise not_found("Credit card")

    try:
        repo.delete(rec)
        db.commit()
    except SQLAlchemyError as e:
        raise write_failed(db, request_id, "card", "delete", e)

    write_succeeded(background_tasks, notifier, request_id, user_id, "card", "delete")
