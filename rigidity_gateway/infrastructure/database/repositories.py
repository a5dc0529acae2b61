"""Data access layer for profiles and expenses, always scoped to one user"""

import uuid
from typing import List, Optional
from sqlalchemy.orm import Session
from rigidity_gateway.infrastructure.database.models import Expense, UserProfile
from rigidity_gateway.domain.models import (
    ClassifiedExpense,
    ExpenseAttributes,
    Intention,
    Profile,
    Rigidity,
    ScoreResult,
)


def _rigidity_or_none(value: Optional[str]) -> Optional[Rigidity]:
    # Unknown stored values count as missing, which the aggregator treats as FIXED
    try:
        return Rigidity(value) if value is not None else None
    except ValueError:
        return None


def _intention_or_default(value: Optional[str]) -> Intention:
    try:
        return Intention(value)
    except ValueError:
        return Intention.ESSENTIAL


def to_profile(row: UserProfile) -> Profile:
    return Profile(
        income_floor=row.income_floor or 0.0,
        income_is_variable=bool(row.income_is_variable),
        dependents=row.dependents or 0,
        emergency_reserve=row.emergency_reserve or 0.0,
        debt_service=row.debt_service or 0.0,
    )


def to_classified_expense(row: Expense) -> ClassifiedExpense:
    return ClassifiedExpense(
        id=str(row.id),
        name=row.name,
        amount=row.amount or 0.0,
        intention=_intention_or_default(row.intention),
        cancelability_score=row.cancelability_score,
        computed_rigidity=_rigidity_or_none(row.computed_rigidity),
        rigidity_effective=_rigidity_or_none(row.rigidity_effective),
    )


class ProfileRepository:
    """Repository for user profiles"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_user(self, user_id: str) -> Optional[UserProfile]:
        return (
            self.db.query(UserProfile)
            .filter(UserProfile.user_id == user_id)
            .first()
        )

    def upsert(self, user_id: str, profile: Profile) -> UserProfile:
        """Create the user's profile or replace every field of the existing one"""
        db_profile = self.get_by_user(user_id)
        if db_profile is None:
            db_profile = UserProfile(user_id=user_id)
            self.db.add(db_profile)

        db_profile.income_floor = profile.income_floor
        db_profile.income_is_variable = profile.income_is_variable
        db_profile.dependents = profile.dependents
        db_profile.emergency_reserve = profile.emergency_reserve
        db_profile.debt_service = profile.debt_service
        self.db.flush()
        return db_profile


class ExpenseRepository:
    """Repository for expenses and their stored classification"""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _apply(db_expense: Expense, attrs: ExpenseAttributes, result: ScoreResult) -> None:
        db_expense.name = attrs.name
        db_expense.amount = attrs.amount
        db_expense.intention = attrs.intention.value
        db_expense.contract_months_remaining = attrs.contract_months_remaining
        db_expense.notice_days = attrs.notice_days
        db_expense.cancellation_fee_pct = attrs.cancellation_fee_pct
        db_expense.has_legal_link = attrs.has_legal_link
        db_expense.essential_obligation = attrs.essential_obligation
        db_expense.substitutability = attrs.substitutability
        db_expense.override_rigidity = attrs.override_rigidity.value if attrs.override_rigidity else None
        db_expense.override_reason = attrs.override_reason
        db_expense.cancelability_score = result.cancelability_score
        db_expense.computed_rigidity = result.computed_rigidity.value
        db_expense.rigidity_effective = result.rigidity_effective.value
        db_expense.warnings = list(result.warnings)
        db_expense.computed_at = result.computed_at

    def create(self, user_id: str, attrs: ExpenseAttributes, result: ScoreResult) -> Expense:
        """Persist a new expense together with its classification"""
        db_expense = Expense(user_id=user_id)
        self._apply(db_expense, attrs, result)
        self.db.add(db_expense)
        self.db.flush()  # Get ID without committing
        return db_expense

    def update(self, db_expense: Expense, attrs: ExpenseAttributes, result: ScoreResult) -> Expense:
        """Replace attributes and classification of an existing expense"""
        self._apply(db_expense, attrs, result)
        self.db.flush()
        return db_expense

    def delete(self, db_expense: Expense) -> None:
        self.db.delete(db_expense)
        self.db.flush()

    def get_for_user(self, user_id: str, expense_id: uuid.UUID) -> Optional[Expense]:
        """Fetch an expense only if it belongs to the user"""
        return (
            self.db.query(Expense)
            .filter(Expense.id == expense_id, Expense.user_id == user_id)
            .first()
        )

    def list_by_user(self, user_id: str) -> List[Expense]:
        """All of the user's expenses, newest first"""
        return (
            self.db.query(Expense)
            .filter(Expense.user_id == user_id)
            .order_by(Expense.created_at.desc())
            .all()
        )

    def list_classified(self, user_id: str) -> List[ClassifiedExpense]:
        return [to_classified_expense(row) for row in self.list_by_user(user_id)]
