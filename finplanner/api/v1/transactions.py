"""Transaction endpoints - single purchases, installment groups and bill payments"""

from typing import Optional
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finplanner.api.dependencies import (
    get_current_user_id,
    get_notification_client,
    get_request_id,
    parse_record_id,
)
from finplanner.api.v1.common import invalid_request, not_found, write_failed, write_succeeded
from finplanner.api.v1.schemas import (
    BillPaymentRequest,
    DividendSchema,
    TransactionCreate,
    TransactionCreateResponse,
    TransactionListResponse,
    TransactionSchema,
    TransactionUpdate,
)
from finplanner.config import settings
from finplanner.domain.exceptions import InvalidInstallmentPlanError
from finplanner.domain.installments import expand_installments
from finplanner.domain.models import CreditCard, Transaction
from finplanner.domain.positions import dividend_for_transaction, is_dividend_category
from finplanner.infrastructure.clients.notifications import NotificationClient
from finplanner.infrastructure.database.repositories import (
    CreditCardRepository,
    DividendRepository,
    InvestmentRepository,
    TransactionRepository,
    card_to_domain,
    dividend_to_domain,
    investment_to_domain,
    transaction_to_domain,
)
from finplanner.infrastructure.database.session import get_db
from finplanner.infrastructure.observability.metrics import record_installment_group

router = APIRouter()

DEFAULT_ICONS = {"income": "payments", "expense": "shopping_bag", "investment": "trending_up"}


def resolve_card(db: Session, user_id: str, card_id: Optional[str]) -> Optional[CreditCard]:
    """Card referenced by a request, 404 when it is not the user's"""
    if not card_id:
        return None
    rec = CreditCardRepository(db).get(user_id, parse_record_id(card_id))
    if rec is None:
        raise not_found("Credit card")
    return card_to_domain(rec)


def build_transaction(body, card: Optional[CreditCard]) -> Transaction:
    return Transaction(
        date=body.date,
        description=body.description,
        category=body.category,
        type=body.type,
        value=body.value,
        icon=body.icon or DEFAULT_ICONS[body.type],
        payment_method=body.payment_method,
        card_id=card.id if card else None,
        card_brand=card.name if card else body.card_brand,
    )


@router.post("/transactions", response_model=TransactionCreateResponse, status_code=201)
def create_transaction(
    body: TransactionCreate,
    background_tasks: BackgroundTasks,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    notifier: NotificationClient = Depends(get_notification_client),
):
    """
    Record a transaction.

    Flow:
    1. Expenses with total_installments > 1 are split into monthly installments
    2. All records are inserted in one database transaction
    3. Income in a dividend category also records a Dividend, linked to the
       holding whose ticker/name appears in the description when one does
    """
    request_id = get_request_id(request)
    card = resolve_card(db, user_id, body.card_id)
    txn = build_transaction(body, card)

    try:
        if body.total_installments > 1:
            txns = expand_installments(txn, body.total_installments)
        else:
            txns = [txn]

        records = TransactionRepository(db).create_batch(user_id, txns)

        dividend = None
        if txn.type == "income" and is_dividend_category(txn.category):
            holdings = [investment_to_domain(r) for r in InvestmentRepository(db).list_for_user(user_id)]
            dividend_rec = DividendRepository(db).create(user_id, dividend_for_transaction(txn, holdings))
            dividend = dividend_to_domain(dividend_rec)

        db.commit()

    except InvalidInstallmentPlanError as e:
        raise invalid_request(db, request_id, e)

    except SQLAlchemyError as e:
        raise write_failed(db, request_id, "transaction", "create", e)

    if len(txns) > 1:
        record_installment_group(len(txns))
    write_succeeded(background_tasks, notifier, request_id, user_id, "transaction", "create", len(records))
    if dividend is not None:
        write_succeeded(background_tasks, notifier, request_id, user_id, "dividend", "create")

    return TransactionCreateResponse(
        transactions=[TransactionSchema.model_validate(transaction_to_domain(r)) for r in records],
        dividend=DividendSchema.model_validate(dividend) if dividend else None,
    )


@router.get("/transactions", response_model=TransactionListResponse)
def list_transactions(
    year: Optional[int] = Query(None, ge=1, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """List the user's transactions, newest first, optionally for one year/month"""
    records = TransactionRepository(db).list_for_user(user_id, year=year, month=month)
    return TransactionListResponse(
        user_id=user_id,
        transactions=[TransactionSchema.model_validate(transaction_to_domain(r)) for r in records],
    )


@router.put("/transactions/{transaction_id}", response_model=TransactionSchema)
def update_transaction(
    transaction_id: str,
    body: TransactionUpdate,
    background_tasks: BackgroundTasks,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    notifier: NotificationClient = Depends(get_notification_client),
):
    """Replace a transaction's fields; installment numbering is kept"""
    request_id = get_request_id(request)
    repo = TransactionRepository(db)
    rec = repo.get(user_id, parse_record_id(transaction_id))
    if rec is None:
        raise not_found("Transaction")

    existing = transaction_to_domain(rec)
    card = resolve_card(db, user_id, body.card_id)
    txn = build_transaction(body, card)
    txn.installments = existing.installments
    txn.installment_number = existing.installment_number
    txn.total_installments = existing.total_installments
    txn.is_bill_payment = existing.is_bill_payment
    txn.bill_card_brand = existing.bill_card_brand
    txn.investment_id = existing.investment_id

    try:
        repo.update(rec, txn)
        db.commit()
    except SQLAlchemyError as e:
        raise write_failed(db, request_id, "transaction", "update", e)

    write_succeeded(background_tasks, notifier, request_id, user_id, "transaction", "update")
    return TransactionSchema.model_validate(transaction_to_domain(rec))


@router.delete("/transactions/{transaction_id}", status_code=204)
def delete_transaction(
    transaction_id: str,
    background_tasks: BackgroundTasks,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    notifier: NotificationClient = Depends(get_notification_client),
):
    request_id = get_request_id(request)
    repo = TransactionRepository(db)
    rec = repo.get(user_id, parse_record_id(transaction_id))
    if rec is None:
        raise not_found("Transaction")

    try:
        repo.delete(rec)
        db.commit()
    except SQLAlchemyError as e:
        raise write_failed(db, request_id, "transaction", "delete", e)

    write_succeeded(background_tasks, notifier, request_id, user_id, "transaction", "delete")


@router.post("/bills/pay", response_model=TransactionSchema, status_code=201)
def pay_bill(
    body: BillPaymentRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    notifier: NotificationClient = Depends(get_notification_client),
):
    """
    Pay a card's projected bill.

    Creates an ordinary expense flagged as a bill payment; the card's
    purchases are left untouched.
    """
    request_id = get_request_id(request)
    card = resolve_card(db, user_id, body.card_id)
    if card is None:
        raise HTTPException(status_code=400, detail="card_id is required")

    payment = Transaction(
        date=body.date,
        description=f"Pagamento fatura {card.name}",
        category=settings.bill_payment_category,
        type="expense",
        value=body.amount,
        icon="credit_card",
        is_bill_payment=True,
        bill_card_brand=card.name,
    )

    try:
        rec = TransactionRepository(db).create(user_id, payment)
        db.commit()
    except SQLAlchemyError as e:
        raise write_failed(db, request_id, "transaction", "pay_bill", e)

    write_succeeded(
        background_tasks, notifier, request_id, user_id, "transaction", "pay_bill", card_name=card.name
    )
    return TransactionSchema.model_validate(transaction_to_domain(rec))
