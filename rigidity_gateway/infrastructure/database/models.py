"""SQLAlchemy ORM models for profiles and classified expenses"""

import uuid
from sqlalchemy import Column, String, Boolean, Float, DateTime, Integer, Text, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class UserProfile(Base):
    """Financial profile, one row per user"""

    __tablename__ = "user_profile"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, unique=True, index=True)
    income_floor = Column(Float, nullable=False, default=0)
    income_is_variable = Column(Boolean, nullable=False, default=False)
    dependents = Column(Integer, nullable=False, default=0)
    emergency_reserve = Column(Float, nullable=False, default=0)
    debt_service = Column(Float, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class Expense(Base):
    """Recurring expense with its server-side classification"""

    __tablename__ = "expense"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    amount = Column(Float, nullable=False, default=0)
    intention = Column(String(16), nullable=False, default="ESSENTIAL")
    contract_months_remaining = Column(Integer, nullable=False, default=0)
    notice_days = Column(Integer, nullable=False, default=0)
    cancellation_fee_pct = Column(Float, nullable=False, default=0)
    has_legal_link = Column(Boolean, nullable=False, default=False)
    essential_obligation = Column(Boolean, nullable=False, default=False)
    substitutability = Column(Integer, nullable=False, default=5)
    override_rigidity = Column(String(16), nullable=True)
    override_reason = Column(Text, nullable=True)

    # Classification (nullable: legacy rows may predate server-side scoring)
    cancelability_score = Column(Integer, nullable=True)
    computed_rigidity = Column(String(16), nullable=True)
    rigidity_effective = Column(String(16), nullable=True)
    warnings = Column(JSON, nullable=False, default=list)
    computed_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
