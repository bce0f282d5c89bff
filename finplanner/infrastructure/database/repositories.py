"""Data access layer for ledger entities, scoped to the owning user"""

import uuid
from typing import List, Optional
from sqlalchemy import extract
from sqlalchemy.orm import Session
from finplanner.infrastructure.database.models import (
    CategoryRecord,
    CreditCardRecord,
    DividendRecord,
    GoalContributionRecord,
    GoalRecord,
    InvestmentRecord,
    RecurringObligationRecord,
    TransactionRecord,
)
from finplanner.domain.models import (
    Category,
    CreditCard,
    Dividend,
    Goal,
    GoalContribution,
    Investment,
    RecurringObligation,
    Transaction,
)
from finplanner.domain.positions import revalue


def _uuid(value: Optional[str]) -> Optional[uuid.UUID]:
    return uuid.UUID(str(value)) if value else None


def _str(value: Optional[uuid.UUID]) -> Optional[str]:
    return str(value) if value else None


# Record -> domain mappers

def transaction_to_domain(rec: TransactionRecord) -> Transaction:
    return Transaction(
        id=_str(rec.id),
        date=rec.date,
        description=rec.description,
        category=rec.category,
        type=rec.type,
        value=rec.value,
        icon=rec.icon,
        payment_method=rec.payment_method,
        installments=rec.installments,
        card_id=_str(rec.card_id),
        card_brand=rec.card_brand,
        installment_number=rec.installment_number,
        total_installments=rec.total_installments,
        is_bill_payment=rec.is_bill_payment,
        bill_card_brand=rec.bill_card_brand,
        investment_id=_str(rec.investment_id),
    )


def recurring_to_domain(rec: RecurringObligationRecord) -> RecurringObligation:
    return RecurringObligation(
        id=_str(rec.id),
        description=rec.description,
        category=rec.category,
        type=rec.type,
        value=rec.value,
        days_of_month=sorted(rec.days_of_month),
        icon=rec.icon,
    )


def card_to_domain(rec: CreditCardRecord) -> CreditCard:
    return CreditCard(
        id=_str(rec.id),
        name=rec.name,
        brand=rec.brand,
        closing_day=rec.closing_day,
        limit=rec.limit,
        color=rec.color,
    )


def investment_to_domain(rec: InvestmentRecord) -> Investment:
    """Holding with total_value and percentage recomputed from the stored quantity and prices"""
    return revalue(
        Investment(
            id=_str(rec.id),
            name=rec.name,
            ticker=rec.ticker,
            category=rec.category,
            quantity=rec.quantity,
            purchase_price=rec.purchase_price,
            current_price=rec.current_price,
            color=rec.color,
            icon=rec.icon,
        )
    )


def dividend_to_domain(rec: DividendRecord) -> Dividend:
    return Dividend(
        id=_str(rec.id),
        investment_id=_str(rec.investment_id),
        asset_name=rec.asset_name,
        value=rec.value,
        date=rec.date,
    )


def goal_to_domain(rec: GoalRecord) -> Goal:
    return Goal(
        id=_str(rec.id),
        title=rec.title,
        deadline=rec.deadline,
        current_value=rec.current_value,
        target_value=rec.target_value,
        category=rec.category,
        icon=rec.icon,
        background_image=rec.background_image,
        status=rec.status,
        last_contribution_date=rec.last_contribution_date,
        monthly_contribution=rec.monthly_contribution,
        completion_date=rec.completion_date,
    )


def contribution_to_domain(rec: GoalContributionRecord) -> GoalContribution:
    return GoalContribution(id=_str(rec.id), goal_id=_str(rec.goal_id), amount=rec.amount, date=rec.date)


def category_to_domain(rec: CategoryRecord) -> Category:
    return Category(id=_str(rec.id), name=rec.name, color=rec.color, icon=rec.icon, type=rec.type)


class UserScopedRepository:
    """Shared lookups for tables owned by a user"""

    model = None

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str, record_id: uuid.UUID):
        """Fetch one record, None when missing or owned by someone else"""
        return (
            self.db.query(self.model)
            .filter(self.model.id == record_id, self.model.user_id == user_id)
            .first()
        )

    def list_for_user(self, user_id: str) -> list:
        return (
            self.db.query(self.model)
            .filter(self.model.user_id == user_id)
            .order_by(self.model.created_at)
            .all()
        )

    def delete(self, record) -> None:
        self.db.delete(record)
        self.db.flush()


class TransactionRepository(UserScopedRepository):
    """Repository for ledger transactions"""

    model = TransactionRecord

    @staticmethod
    def _apply(rec: TransactionRecord, txn: Transaction) -> TransactionRecord:
        rec.date = txn.date
        rec.description = txn.description
        rec.category = txn.category
        rec.type = txn.type
        rec.value = txn.value
        rec.icon = txn.icon
        rec.payment_method = txn.payment_method
        rec.installments = txn.installments
        rec.card_id = _uuid(txn.card_id)
        rec.card_brand = txn.card_brand
        rec.installment_number = txn.installment_number
        rec.total_installments = txn.total_installments
        rec.is_bill_payment = txn.is_bill_payment
        rec.bill_card_brand = txn.bill_card_brand
        rec.investment_id = _uuid(txn.investment_id)
        return rec

    def create(self, user_id: str, txn: Transaction) -> TransactionRecord:
        """Persist a single transaction"""
        return self.create_batch(user_id, [txn])[0]

    def create_batch(self, user_id: str, txns: List[Transaction]) -> List[TransactionRecord]:
        """
        Insert several transactions in the caller's database transaction.

        Nothing is committed here; a rollback by the caller discards the
        whole batch.
        """
        records = [self._apply(TransactionRecord(user_id=user_id), txn) for txn in txns]
        self.db.add_all(records)
        self.db.flush()
        return records

    def update(self, rec: TransactionRecord, txn: Transaction) -> TransactionRecord:
        self._apply(rec, txn)
        self.db.flush()
        return rec

    def list_for_user(
        self,
        user_id: str,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> List[TransactionRecord]:
        """Fetch transactions newest first, optionally restricted to a year/month"""
        query = self.db.query(TransactionRecord).filter(TransactionRecord.user_id == user_id)
        if year is not None:
            query = query.filter(extract("year", TransactionRecord.date) == year)
        if month is not None:
            query = query.filter(extract("month", TransactionRecord.date) == month)
        return query.order_by(TransactionRecord.date.desc(), TransactionRecord.created_at.desc()).all()


class RecurringObligationRepository(UserScopedRepository):
    """Repository for recurring obligation templates"""

    model = RecurringObligationRecord

    @staticmethod
    def _apply(rec: RecurringObligationRecord, obligation: RecurringObligation) -> RecurringObligationRecord:
        rec.description = obligation.description
        rec.category = obligation.category
        rec.type = obligation.type
        rec.value = obligation.value
        rec.days_of_month = list(obligation.days_of_month)
        rec.icon = obligation.icon
        return rec

    def create(self, user_id: str, obligation: RecurringObligation) -> RecurringObligationRecord:
        rec = self._apply(RecurringObligationRecord(user_id=user_id), obligation)
        self.db.add(rec)
        self.db.flush()
        return rec

    def replace(self, rec: RecurringObligationRecord, obligation: RecurringObligation) -> RecurringObligationRecord:
        """Overwrite every field, including the whole day list"""
        self._apply(rec, obligation)
        self.db.flush()
        return rec


class CreditCardRepository(UserScopedRepository):
    """Repository for credit cards"""

    model = CreditCardRecord

    @staticmethod
    def _apply(rec: CreditCardRecord, card: CreditCard) -> CreditCardRecord:
        rec.name = card.name
        rec.brand = card.brand
        rec.closing_day = card.closing_day
        rec.limit = card.limit
        rec.color = card.color
        return rec

    def create(self, user_id: str, card: CreditCard) -> CreditCardRecord:
        rec = self._apply(CreditCardRecord(user_id=user_id), card)
        self.db.add(rec)
        self.db.flush()
        return rec

    def update(self, rec: CreditCardRecord, card: CreditCard) -> CreditCardRecord:
        self._apply(rec, card)
        self.db.flush()
        return rec


class InvestmentRepository(UserScopedRepository):
    """Repository for investment holdings"""

    model = InvestmentRecord

    @staticmethod
    def _apply(rec: InvestmentRecord, inv: Investment) -> InvestmentRecord:
        rec.name = inv.name
        rec.ticker = inv.ticker
        rec.category = inv.category
        rec.quantity = inv.quantity
        rec.purchase_price = inv.purchase_price
        rec.current_price = inv.current_price
        rec.total_value = inv.total_value
        rec.percentage = inv.percentage
        rec.color = inv.color
        rec.icon = inv.icon
        return rec

    def save(self, user_id: str, inv: Investment) -> InvestmentRecord:
        """Insert a new holding or overwrite the existing one with inv.id"""
        rec = self.get(user_id, _uuid(inv.id)) if inv.id else None
        if rec is None:
            rec = InvestmentRecord(user_id=user_id)
            self.db.add(rec)
        self._apply(rec, inv)
        self.db.flush()
        return rec


class DividendRepository(UserScopedRepository):
    """Repository for dividends"""

    model = DividendRecord

    def create(self, user_id: str, dividend: Dividend) -> DividendRecord:
        rec = DividendRecord(
            user_id=user_id,
            investment_id=_uuid(dividend.investment_id),
            asset_name=dividend.asset_name,
            value=dividend.value,
            date=dividend.date,
        )
        self.db.add(rec)
        self.db.flush()
        return rec

    def list_for_user(self, user_id: str) -> List[DividendRecord]:
        """Fetch dividends newest first"""
        return (
            self.db.query(DividendRecord)
            .filter(DividendRecord.user_id == user_id)
            .order_by(DividendRecord.date.desc())
            .all()
        )


class GoalRepository(UserScopedRepository):
    """Repository for goals and their contribution history"""

    model = GoalRecord

    @staticmethod
    def _apply(rec: GoalRecord, goal: Goal) -> GoalRecord:
        rec.title = goal.title
        rec.deadline = goal.deadline
        rec.current_value = goal.current_value
        rec.target_value = goal.target_value
        rec.category = goal.category
        rec.icon = goal.icon
        rec.background_image = goal.background_image
        rec.status = goal.status
        rec.last_contribution_date = goal.last_contribution_date
        rec.monthly_contribution = goal.monthly_contribution
        rec.completion_date = goal.completion_date
        return rec

    def create(self, user_id: str, goal: Goal) -> GoalRecord:
        rec = self._apply(GoalRecord(user_id=user_id), goal)
        self.db.add(rec)
        self.db.flush()
        return rec

    def update(self, rec: GoalRecord, goal: Goal) -> GoalRecord:
        self._apply(rec, goal)
        self.db.flush()
        return rec

    def add_contribution(self, user_id: str, contribution: GoalContribution) -> GoalContributionRecord:
        rec = GoalContributionRecord(
            goal_id=_uuid(contribution.goal_id),
            user_id=user_id,
            amount=contribution.amount,
            date=contribution.date,
        )
        self.db.add(rec)
        self.db.flush()
        return rec

    def list_contributions(self, user_id: str, goal_id: Optional[uuid.UUID] = None) -> List[GoalContributionRecord]:
        """Contributions newest first, for one goal or all of the user's goals"""
        query = self.db.query(GoalContributionRecord).filter(GoalContributionRecord.user_id == user_id)
        if goal_id is not None:
            query = query.filter(GoalContributionRecord.goal_id == goal_id)
        return query.order_by(GoalContributionRecord.date.desc()).all()


class CategoryRepository(UserScopedRepository):
    """Repository for user-defined categories"""

    model = CategoryRecord

    def create(self, user_id: str, category: Category) -> CategoryRecord:
        rec = CategoryRecord(
            user_id=user_id,
            name=category.name,
            color=category.color,
            icon=category.icon,
            type=category.type,
        )
        self.db.add(rec)
        self.db.flush()
        return rec
