"""Investment and dividend endpoints"""

import logging
from dataclasses import replace
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
from finplanner.api.v1.schemas import (
    DividendCreate,
    DividendListResponse,
    DividendSchema,
    DividendSummarySchema,
    InvestmentBuyResponse,
    InvestmentCreate,
    InvestmentSchema,
    InvestmentUpdate,
    PortfolioResponse,
    PortfolioSummarySchema,
    TransactionSchema,
)
from finplanner.domain.models import Dividend, Investment, InvestmentPurchase
from finplanner.domain.positions import (
    dividend_summary,
    match_dividend,
    merge_purchase,
    portfolio_summary,
    revalue,
)
from finplanner.infrastructure.clients.notifications import NotificationClient
from finplanner.infrastructure.database.repositories import (
    DividendRepository,
    InvestmentRepository,
    TransactionRepository,
    dividend_to_domain,
    investment_to_domain,
    transaction_to_domain,
)
from finplanner.infrastructure.database.session import get_db
from finplanner.infrastructure.observability.metrics import record_investment_buy

router = APIRouter()


@router.post("/investments", response_model=InvestmentBuyResponse, status_code=201)
def buy_investment(
    body: InvestmentCreate,
    background_tasks: BackgroundTasks,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    notifier: NotificationClient = Depends(get_notification_client),
):
    """
    Add a buy or contribution to the portfolio.

    Flow:
    1. Match an existing holding (ticker, else name + category)
    2. Merge with weighted-average cost, or open a new holding
    3. Record the lot's cash outflow as an "Investimento" expense
    4. Persist holding and contribution in one database transaction, the
       contribution carrying the holding's id
    """
    request_id = get_request_id(request)
    purchase = InvestmentPurchase(
        name=body.name,
        ticker=body.ticker,
        category=body.category,
        quantity=body.quantity,
        purchase_price=body.purchase_price,
        current_price=body.current_price,
        color=body.color,
        icon=body.icon,
        purchased_on=body.date,
    )

    inv_repo = InvestmentRepository(db)
    holdings = [investment_to_domain(r) for r in inv_repo.list_for_user(user_id)]
    result = merge_purchase(purchase, holdings)

    try:
        inv_rec = inv_repo.save(user_id, result.investment)
        contribution = replace(result.contribution, investment_id=str(inv_rec.id))
        txn_rec = TransactionRepository(db).create(user_id, contribution)
        db.commit()
    except SQLAlchemyError as e:
        raise write_failed(db, request_id, "investment", "buy", e)

    record_investment_buy(result.merged)
    write_succeeded(
        background_tasks, notifier, request_id, user_id, "investment", "buy",
        merged=result.merged, asset=body.ticker or body.name,
    )
    return InvestmentBuyResponse(
        investment=InvestmentSchema.model_validate(investment_to_domain(inv_rec)),
        merged=result.merged,
        contribution=TransactionSchema.model_validate(transaction_to_domain(txn_rec)),
    )


@router.get("/investments", response_model=PortfolioResponse)
def list_investments(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Holdings with portfolio totals and allocation by category"""
    holdings = [investment_to_domain(r) for r in InvestmentRepository(db).list_for_user(user_id)]
    summary = portfolio_summary(holdings)
    return PortfolioResponse(
        user_id=user_id,
        investments=[InvestmentSchema.model_validate(h) for h in holdings],
        summary=PortfolioSummarySchema(
            total_value=summary.total_value,
            total_cost=summary.total_cost,
            profit=summary.profit,
            profit_percentage=summary.profit_percentage,
            allocation=summary.allocation,
            largest_position_id=summary.largest_position.id if summary.largest_position else None,
        ),
    )


@router.put("/investments/{investment_id}", response_model=InvestmentSchema)
def update_investment(
    investment_id: str,
    body: InvestmentUpdate,
    background_tasks: BackgroundTasks,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    notifier: NotificationClient = Depends(get_notification_client),
):
    """Direct edit of a holding; totals are recomputed, no averaging is applied"""
    request_id = get_request_id(request)
    repo = InvestmentRepository(db)
    rec = repo.get(user_id, parse_record_id(investment_id))
    if rec is None:
        raise not_found("Investment")

    investment = revalue(
        Investment(
            id=str(rec.id),
            name=body.name,
            ticker=body.ticker or None,
            category=body.category,
            quantity=body.quantity,
            purchase_price=body.purchase_price,
            current_price=body.current_price,
            color=body.color,
            icon=body.icon,
        )
    )

    try:
        rec = repo.save(user_id, investment)
        db.commit()
    except SQLAlchemyError as e:
        raise write_failed(db, request_id, "investment", "update", e)

    write_succeeded(background_tasks, notifier, request_id, user_id, "investment", "update")
    return InvestmentSchema.model_validate(investment_to_domain(rec))


@router.delete("/investments/{investment_id}", status_code=204)
def delete_investment(
    investment_id: str,
    background_tasks: BackgroundTasks,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    notifier: NotificationClient = Depends(get_notification_client),
):
    """
    Remove a holding unconditionally.

    Contribution transactions and dividends that referenced it are kept as
    historical cash-flow records.
    """
    request_id = get_request_id(request)
    repo = InvestmentRepository(db)
    rec = repo.get(user_id, parse_record_id(investment_id))
    if rec is None:
        raise not_found("Investment")

    try:
        repo.delete(rec)
        db.commit()
    except SQLAlchemyError as e:
        raise write_failed(db, request_id, "investment", "delete", e)

    write_succeeded(background_tasks, notifier, request_id, user_id, "investment", "delete")


@router.post("/dividends", response_model=DividendSchema, status_code=201)
def create_dividend(
    body: DividendCreate,
    background_tasks: BackgroundTasks,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    notifier: NotificationClient = Depends(get_notification_client),
):
    """
    Record a dividend.

    An explicit investment_id is used as given; otherwise, when auto_match is
    on, the asset name is matched against holdings as a best guess.
    """
    request_id = get_request_id(request)
    inv_repo = InvestmentRepository(db)
    investment_id = None

    if body.investment_id:
        rec = inv_repo.get(user_id, parse_record_id(body.investment_id))
        if rec is None:
            raise not_found("Investment")
        investment_id = str(rec.id)
    elif body.auto_match:
        holdings = [investment_to_domain(r) for r in inv_repo.list_for_user(user_id)]
        holding = match_dividend(body.asset_name, holdings)
        if holding is not None:
            investment_id = holding.id
            logging.info(
                "Dividend matched to holding by name",
                extra={"request_id": request_id, "investment_id": investment_id},
            )

    dividend = Dividend(asset_name=body.asset_name, value=body.value, date=body.date, investment_id=investment_id)

    try:
        div_rec = DividendRepository(db).create(user_id, dividend)
        db.commit()
    except SQLAlchemyError as e:
        raise write_failed(db, request_id, "dividend", "create", e)

    write_succeeded(background_tasks, notifier, request_id, user_id, "dividend", "create")
    return DividendSchema.model_validate(dividend_to_domain(div_rec))


@router.get("/dividends", response_model=DividendListResponse)
def list_dividends(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    dividends = [dividend_to_domain(r) for r in DividendRepository(db).list_for_user(user_id)]
    return DividendListResponse(
        user_id=user_id,
        dividends=[DividendSchema.model_validate(d) for d in dividends],
        summary=DividendSummarySchema.model_validate(dividend_summary(dividends)),
    )
