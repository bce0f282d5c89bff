"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional


@dataclass
class Transaction:
    """Single entry in the cash-flow ledger"""

    date: date
    description: str
    category: str
    type: str  # "income", "expense" or "investment"
    value: Decimal
    icon: str = "payments"
    payment_method: Optional[str] = None
    installments: Optional[str] = None  # "Nx" label shared by an installment group
    card_id: Optional[str] = None
    card_brand: Optional[str] = None  # card display name
    installment_number: Optional[int] = None
    total_installments: Optional[int] = None
    is_bill_payment: bool = False
    bill_card_brand: Optional[str] = None
    investment_id: Optional[str] = None  # holding an "Aporte" contribution was made to
    id: Optional[str] = None


@dataclass
class RecurringObligation:
    """Template for a transaction repeating on fixed days of every month"""

    description: str
    category: str
    type: str
    value: Decimal
    days_of_month: List[int]
    icon: str = "more_horiz"
    id: Optional[str] = None


@dataclass
class CreditCard:
    name: str
    closing_day: int
    brand: str = ""
    limit: Decimal = Decimal("0")
    color: str = "#8c2bee"
    id: Optional[str] = None


@dataclass
class ProjectedBill:
    """Derived statement estimate for one card in one month, never persisted"""

    card_id: Optional[str]
    card_name: str
    day: int
    amount: Decimal


@dataclass
class Holiday:
    month_day: str  # "MM-DD"
    name: str


@dataclass
class DayProjection:
    """Everything expected to happen on one calendar day"""

    date: date
    holiday: Optional[str] = None
    obligations: List[RecurringObligation] = field(default_factory=list)
    bills: List[ProjectedBill] = field(default_factory=list)


@dataclass
class Investment:
    """Aggregated position in one asset (a holding)"""

    name: str
    category: str
    quantity: Decimal
    purchase_price: Decimal  # quantity-weighted average cost
    current_price: Decimal
    total_value: Decimal = Decimal("0")
    percentage: Decimal = Decimal("0")  # unrealised return in percent
    ticker: Optional[str] = None
    color: str = "#8c2bee"
    icon: str = "trending_up"
    id: Optional[str] = None


@dataclass
class InvestmentPurchase:
    """New buy or contribution entered by the user"""

    name: str
    category: str
    quantity: Decimal
    purchase_price: Decimal
    current_price: Decimal
    purchased_on: date
    ticker: Optional[str] = None
    color: str = "#8c2bee"
    icon: str = "trending_up"


@dataclass
class MergeResult:
    """Outcome of adding a purchase to the portfolio"""

    investment: Investment
    merged: bool
    contribution: Transaction


@dataclass
class Dividend:
    asset_name: str
    value: Decimal
    date: date
    investment_id: Optional[str] = None
    id: Optional[str] = None


@dataclass
class Goal:
    title: str
    deadline: date
    target_value: Decimal
    category: str
    icon: str = "flag"
    current_value: Decimal = Decimal("0")
    status: str = "Iniciado"
    background_image: Optional[str] = None
    last_contribution_date: Optional[date] = None
    monthly_contribution: Optional[Decimal] = None
    completion_date: Optional[date] = None
    id: Optional[str] = None


@dataclass
class GoalContribution:
    goal_id: str
    amount: Decimal
    date: date
    id: Optional[str] = None


@dataclass
class Category:
    name: str
    color: str
    icon: str
    type: str  # "income" or "expense"
    id: Optional[str] = None
    system: bool = False


@dataclass
class PortfolioSummary:
    total_value: Decimal
    total_cost: Decimal
    profit: Decimal
    profit_percentage: Decimal
    allocation: Dict[str, Decimal]  # category -> percent of total value
    largest_position: Optional[Investment] = None


@dataclass
class DividendSummary:
    total: Decimal
    monthly_average: Decimal
    months_with_income: int


@dataclass
class MonthlySummary:
    year: int
    month: int
    income: Decimal
    expense: Decimal
    invested: Decimal
    balance: Decimal
    expenses_by_category: Dict[str, Decimal]
