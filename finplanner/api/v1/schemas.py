"""Pydantic schemas for API request/response validation"""

import datetime as dt
from decimal import Decimal
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


TransactionType = Literal["income", "expense", "investment"]


class DomainSchema(BaseModel):
    """Response model built from domain dataclasses"""

    model_config = ConfigDict(from_attributes=True)


# Transactions


class TransactionBase(BaseModel):
    date: dt.date
    description: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    type: TransactionType = "expense"
    value: Decimal = Field(..., gt=0, description="Amount in BRL")
    icon: Optional[str] = None
    payment_method: Optional[str] = None
    card_id: Optional[str] = Field(None, description="Credit card the purchase was charged to")
    card_brand: Optional[str] = Field(None, description="Card display name, used when card_id is absent")


class TransactionCreate(TransactionBase):
    """Request body for POST /v1/transactions"""

    total_installments: int = Field(1, ge=1, le=120, description="Split expense into N monthly installments")


class TransactionUpdate(TransactionBase):
    """Request body for PUT /v1/transactions/{id} (full field set)"""

    pass


class TransactionSchema(DomainSchema):
    id: str
    date: dt.date
    description: str
    category: str
    type: str
    value: Decimal
    icon: str
    payment_method: Optional[str] = None
    installments: Optional[str] = None
    card_id: Optional[str] = None
    card_brand: Optional[str] = None
    installment_number: Optional[int] = None
    total_installments: Optional[int] = None
    is_bill_payment: bool = False
    bill_card_brand: Optional[str] = None
    investment_id: Optional[str] = None


class DividendSchema(DomainSchema):
    id: str
    investment_id: Optional[str] = None
    asset_name: str
    value: Decimal
    date: dt.date


class TransactionCreateResponse(BaseModel):
    """Response for POST /v1/transactions"""

    transactions: List[TransactionSchema]
    dividend: Optional[DividendSchema] = None


class TransactionListResponse(BaseModel):
    user_id: str
    transactions: List[TransactionSchema]


class BillPaymentRequest(BaseModel):
    """Request body for POST /v1/bills/pay"""

    card_id: str
    amount: Decimal = Field(..., gt=0)
    date: dt.date = Field(default_factory=dt.date.today)


# Recurring obligations


class RecurringRequest(BaseModel):
    """
    Request body for creating or replacing a recurring obligation.

    Days come either as an explicit list or derived from a date range.
    """

    description: str = Field(..., min_length=1)
    category: str = "Outros"
    type: TransactionType = "expense"
    value: Decimal = Field(..., gt=0)
    icon: str = "more_horiz"
    days_of_month: Optional[List[int]] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None


class RecurringSchema(DomainSchema):
    id: str
    description: str
    category: str
    type: str
    value: Decimal
    days_of_month: List[int]
    icon: str


class RecurringListResponse(BaseModel):
    user_id: str
    obligations: List[RecurringSchema]


# Calendar


class ProjectedBillSchema(DomainSchema):
    card_id: Optional[str] = None
    card_name: str
    day: int
    amount: Decimal


class DayProjectionSchema(DomainSchema):
    date: dt.date
    holiday: Optional[str] = None
    obligations: List[RecurringSchema]
    bills: List[ProjectedBillSchema]


class CalendarResponse(BaseModel):
    """Response for GET /v1/calendar/{month,week,day}"""

    view: Literal["month", "week", "day"]
    start: dt.date
    end: dt.date
    days: List[DayProjectionSchema]


class HolidaySchema(DomainSchema):
    month_day: str
    name: str


class HolidaysResponse(BaseModel):
    year: int
    easter: dt.date
    holidays: List[HolidaySchema]


# Credit cards


class CardRequest(BaseModel):
    name: str = Field(..., min_length=1)
    brand: str = ""
    closing_day: int = Field(..., ge=1, le=31)
    limit: Decimal = Field(Decimal("0"), ge=0)
    color: str = "#8c2bee"


class CardSchema(DomainSchema):
    id: str
    name: str
    brand: str
    closing_day: int
    limit: Decimal
    color: str


class CardListResponse(BaseModel):
    user_id: str
    cards: List[CardSchema]


# Investments


class InvestmentCreate(BaseModel):
    """Request body for POST /v1/investments (a buy or contribution)"""

    name: str = Field(..., min_length=1)
    ticker: Optional[str] = None
    category: str = Field(..., min_length=1)
    quantity: Decimal = Field(..., gt=0)
    purchase_price: Decimal = Field(..., gt=0)
    current_price: Decimal = Field(..., ge=0)
    color: str = "#8c2bee"
    icon: str = "trending_up"
    date: dt.date = Field(default_factory=dt.date.today)


class InvestmentUpdate(BaseModel):
    """Request body for PUT /v1/investments/{id} (direct edit, no averaging)"""

    name: str = Field(..., min_length=1)
    ticker: Optional[str] = None
    category: str = Field(..., min_length=1)
    quantity: Decimal = Field(..., ge=0)
    purchase_price: Decimal = Field(..., ge=0)
    current_price: Decimal = Field(..., ge=0)
    color: str = "#8c2bee"
    icon: str = "trending_up"


class InvestmentSchema(DomainSchema):
    id: str
    name: str
    ticker: Optional[str] = None
    category: str
    quantity: Decimal
    purchase_price: Decimal
    current_price: Decimal
    total_value: Decimal
    percentage: Decimal
    color: str
    icon: str


class InvestmentBuyResponse(BaseModel):
    investment: InvestmentSchema
    merged: bool
    contribution: TransactionSchema


class PortfolioSummarySchema(BaseModel):
    total_value: Decimal
    total_cost: Decimal
    profit: Decimal
    profit_percentage: Decimal
    allocation: Dict[str, Decimal]
    largest_position_id: Optional[str] = None


class PortfolioResponse(BaseModel):
    user_id: str
    investments: List[InvestmentSchema]
    summary: PortfolioSummarySchema


class DividendCreate(BaseModel):
    asset_name: str = Field(..., min_length=1)
    value: Decimal = Field(..., gt=0)
    date: dt.date
    investment_id: Optional[str] = None
    auto_match: bool = Field(True, description="Best-guess link to a holding by ticker/name when no investment_id")


class DividendSummarySchema(DomainSchema):
    total: Decimal
    monthly_average: Decimal
    months_with_income: int


class DividendListResponse(BaseModel):
    user_id: str
    dividends: List[DividendSchema]
    summary: DividendSummarySchema


# Goals


class GoalRequest(BaseModel):
    title: str = Field(..., min_length=1)
    deadline: dt.date
    target_value: Decimal = Field(..., gt=0)
    category: str = "Outros"
    icon: str = "flag"
    background_image: Optional[str] = None
    monthly_contribution: Optional[Decimal] = Field(None, gt=0)
    status: Optional[Literal["Iniciado", "Em Andamento", "Falta Pouco", "Essencial"]] = None


class GoalSchema(DomainSchema):
    id: str
    title: str
    deadline: dt.date
    current_value: Decimal
    target_value: Decimal
    category: str
    icon: str
    background_image: Optional[str] = None
    status: str
    last_contribution_date: Optional[dt.date] = None
    monthly_contribution: Optional[Decimal] = None
    completion_date: Optional[dt.date] = None
    progress: Decimal = Decimal("0")
    months_remaining: int = 0


class GoalListResponse(BaseModel):
    user_id: str
    active: List[GoalSchema]
    completed: List[GoalSchema]


class ContributionCreate(BaseModel):
    amount: Decimal = Field(..., gt=0)
    date: dt.date = Field(default_factory=dt.date.today)


class ContributionSchema(DomainSchema):
    id: str
    goal_id: str
    amount: Decimal
    date: dt.date


class ContributionResponse(BaseModel):
    goal: GoalSchema
    contribution: ContributionSchema


class ContributionListResponse(BaseModel):
    goal_id: str
    contributions: List[ContributionSchema]


# Categories


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1)
    color: str = "#94a3b8"
    icon: str = "more_horiz"
    type: Literal["income", "expense"] = "expense"


class CategorySchema(DomainSchema):
    id: str
    name: str
    color: str
    icon: str
    type: str
    system: bool = False


class CategoryListResponse(BaseModel):
    user_id: str
    categories: List[CategorySchema]


# Summary


class MonthlySummarySchema(DomainSchema):
    year: int
    month: int
    income: Decimal
    expense: Decimal
    invested: Decimal
    balance: Decimal
    expenses_by_category: Dict[str, Decimal]
