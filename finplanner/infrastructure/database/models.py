"""SQLAlchemy ORM models for the finance ledger"""

import uuid
from sqlalchemy import Column, String, Boolean, Numeric, DateTime, Date, Integer, ForeignKey, Text, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

MONEY = Numeric(14, 2)
PRECISE = Numeric(20, 8)
# Holds quantity * current_price of two PRECISE values without rounding
PRODUCT = Numeric(40, 16)


class TransactionRecord(Base):
    """Cash-flow ledger entry (single purchase, installment or bill payment)"""

    __tablename__ = "transactions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    description = Column(Text, nullable=False)
    category = Column(Text, nullable=False)
    type = Column(String(16), nullable=False)
    value = Column(MONEY, nullable=False)
    icon = Column(Text, nullable=False, default="payments")
    payment_method = Column(Text, nullable=True)
    installments = Column(String(8), nullable=True)
    # Plain column: deleting a card keeps its historical transactions
    card_id = Column(UUID(as_uuid=True), nullable=True)
    card_brand = Column(Text, nullable=True)
    installment_number = Column(Integer, nullable=True)
    total_installments = Column(Integer, nullable=True)
    is_bill_payment = Column(Boolean, nullable=False, default=False)
    bill_card_brand = Column(Text, nullable=True)
    # Plain column: contributions outlive the holding they bought into
    investment_id = Column(UUID(as_uuid=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class RecurringObligationRecord(Base):
    """Monthly recurring transaction template"""

    __tablename__ = "recurring_obligations"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    description = Column(Text, nullable=False)
    category = Column(Text, nullable=False)
    type = Column(String(16), nullable=False)
    value = Column(MONEY, nullable=False)
    days_of_month = Column(JSON, nullable=False)
    icon = Column(Text, nullable=False, default="more_horiz")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class CreditCardRecord(Base):
    __tablename__ = "credit_cards"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    brand = Column(Text, nullable=False, default="")
    closing_day = Column(Integer, nullable=False)
    limit = Column(MONEY, nullable=False, default=0)
    color = Column(Text, nullable=False, default="#8c2bee")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class InvestmentRecord(Base):
    """Aggregated holding with weighted-average cost"""

    __tablename__ = "investments"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    ticker = Column(Text, nullable=True)
    category = Column(Text, nullable=False)
    quantity = Column(PRECISE, nullable=False)
    purchase_price = Column(PRECISE, nullable=False)
    current_price = Column(PRECISE, nullable=False)
    total_value = Column(PRODUCT, nullable=False)
    percentage = Column(PRECISE, nullable=False, default=0)
    color = Column(Text, nullable=False, default="#8c2bee")
    icon = Column(Text, nullable=False, default="trending_up")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class DividendRecord(Base):
    """Dividend received; investment_id may point to a holding that no longer exists"""

    __tablename__ = "dividends"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    investment_id = Column(UUID(as_uuid=True), nullable=True)
    asset_name = Column(Text, nullable=False)
    value = Column(MONEY, nullable=False)
    date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class GoalRecord(Base):
    __tablename__ = "goals"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    title = Column(Text, nullable=False)
    deadline = Column(Date, nullable=False)
    current_value = Column(MONEY, nullable=False, default=0)
    target_value = Column(MONEY, nullable=False)
    category = Column(Text, nullable=False)
    icon = Column(Text, nullable=False, default="flag")
    background_image = Column(Text, nullable=True)
    status = Column(Text, nullable=False, default="Iniciado")
    last_contribution_date = Column(Date, nullable=True)
    monthly_contribution = Column(MONEY, nullable=True)
    completion_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    contributions = relationship("GoalContributionRecord", back_populates="goal", cascade="all, delete-orphan")


class GoalContributionRecord(Base):
    __tablename__ = "goal_contributions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    goal_id = Column(UUID(as_uuid=True), ForeignKey("goals.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Text, nullable=False, index=True)
    amount = Column(MONEY, nullable=False)
    date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    goal = relationship("GoalRecord", back_populates="contributions")


class CategoryRecord(Base):
    __tablename__ = "categories"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    color = Column(Text, nullable=False)
    icon = Column(Text, nullable=False)
    type = Column(String(16), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
