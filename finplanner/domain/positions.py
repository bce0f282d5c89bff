"""Investment position engine - weighted-average cost merging and dividend linkage"""

from dataclasses import replace
from decimal import Decimal
from typing import Dict, List, Optional
from finplanner.config import settings
from finplanner.domain.models import (
    Dividend,
    DividendSummary,
    Investment,
    InvestmentPurchase,
    MergeResult,
    PortfolioSummary,
    Transaction,
)
from finplanner.utils.money import quantize_money

DIVIDEND_CATEGORIES = {"dividendos", "dividendo", "proventos"}

ZERO = Decimal("0")


def _norm(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def is_dividend_category(category: str) -> bool:
    return _norm(category) in DIVIDEND_CATEGORIES


def unrealised_return(quantity: Decimal, purchase_price: Decimal, total_value: Decimal) -> Decimal:
    """Return on cost in percent; zero when the position has no cost"""
    cost = purchase_price * quantity
    if cost <= 0:
        return ZERO
    return (total_value / cost - 1) * 100


def revalue(investment: Investment) -> Investment:
    """Recompute total_value and percentage from quantity and prices"""
    total_value = investment.quantity * investment.current_price
    return replace(
        investment,
        total_value=total_value,
        percentage=unrealised_return(investment.quantity, investment.purchase_price, total_value),
    )


def find_matching_holding(purchase: InvestmentPurchase, holdings: List[Investment]) -> Optional[Investment]:
    """
    Identity rule: ticker (case-insensitive) when the purchase has one,
    otherwise name and category together (case-insensitive).
    """
    ticker = _norm(purchase.ticker)
    for holding in holdings:
        if ticker:
            if _norm(holding.ticker) == ticker:
                return holding
        elif _norm(holding.name) == _norm(purchase.name) and _norm(holding.category) == _norm(purchase.category):
            return holding
    return None


def contribution_transaction(purchase: InvestmentPurchase) -> Transaction:
    """
    Cash-flow entry for a buy, valued at the new lot only
    (quantity * purchase_price), never at the blended position.
    """
    return Transaction(
        date=purchase.purchased_on,
        description=f"Aporte: {purchase.ticker or purchase.name}",
        category=settings.investment_category,
        type="expense",
        value=quantize_money(purchase.quantity * purchase.purchase_price),
        icon=purchase.icon,
    )


def merge_purchase(purchase: InvestmentPurchase, holdings: List[Investment]) -> MergeResult:
    """
    Add a purchase to the portfolio.

    Merge branch:
        avg_cost = (qty_old * avg_old + qty_new * price_new) / (qty_old + qty_new)
        quantity = qty_old + qty_new
        current_price = incoming current price (latest observation wins)

    A non-positive purchase price is not rejected here; form validation is the
    only guard.
    """
    contribution = contribution_transaction(purchase)
    existing = find_matching_holding(purchase, holdings)

    if existing is None:
        investment = revalue(
            Investment(
                name=purchase.name,
                ticker=purchase.ticker or None,
                category=purchase.category,
                quantity=purchase.quantity,
                purchase_price=purchase.purchase_price,
                current_price=purchase.current_price,
                color=purchase.color,
                icon=purchase.icon,
            )
        )
        return MergeResult(investment=investment, merged=False, contribution=contribution)

    new_quantity = existing.quantity + purchase.quantity
    average_cost = (
        existing.quantity * existing.purchase_price + purchase.quantity * purchase.purchase_price
    ) / new_quantity

    investment = revalue(
        replace(
            existing,
            quantity=new_quantity,
            purchase_price=average_cost,
            current_price=purchase.current_price,
        )
    )
    return MergeResult(investment=investment, merged=True, contribution=contribution)


def match_dividend(description: str, holdings: List[Investment]) -> Optional[Investment]:
    """
    Best-guess holding for a dividend description: first holding whose ticker,
    then first whose name, appears in the text (case-insensitive substring).
    Blank tickers and names never match. Short tickers contained in other
    tickers can mismatch.
    """
    text = _norm(description)
    if not text:
        return None
    for key in ("ticker", "name"):
        for holding in holdings:
            needle = _norm(getattr(holding, key))
            if needle and needle in text:
                return holding
    return None


def dividend_for_transaction(txn: Transaction, holdings: List[Investment]) -> Dividend:
    """Dividend record for an income transaction in a dividend category"""
    holding = match_dividend(txn.description, holdings)
    if holding is None:
        return Dividend(asset_name=txn.description, value=txn.value, date=txn.date, investment_id=None)
    return Dividend(
        asset_name=holding.ticker or holding.name,
        value=txn.value,
        date=txn.date,
        investment_id=holding.id,
    )


def portfolio_summary(holdings: List[Investment]) -> PortfolioSummary:
    total_value = sum((h.total_value for h in holdings), ZERO)
    total_cost = sum((h.purchase_price * h.quantity for h in holdings), ZERO)
    profit = total_value - total_cost
    profit_percentage = profit / total_cost * 100 if total_cost > 0 else ZERO

    by_category: Dict[str, Decimal] = {}
    for holding in holdings:
        by_category[holding.category] = by_category.get(holding.category, ZERO) + holding.total_value

    allocation: Dict[str, Decimal] = {}
    if total_value > 0:
        for category, value in sorted(by_category.items(), key=lambda kv: kv[1], reverse=True):
            if value > 0:
                allocation[category] = value / total_value * 100

    largest = max(holdings, key=lambda h: h.total_value) if holdings else None

    return PortfolioSummary(
        total_value=total_value,
        total_cost=total_cost,
        profit=profit,
        profit_percentage=profit_percentage,
        allocation=allocation,
        largest_position=largest,
    )


def dividend_summary(dividends: List[Dividend]) -> DividendSummary:
    """Total received and the average over months that had any dividend"""
    total = sum((d.value for d in dividends), ZERO)
    months = len({(d.date.year, d.date.month) for d in dividends})
    average = total / months if months else ZERO
    return DividendSummary(total=total, monthly_average=quantize_money(average), months_with_income=months)
