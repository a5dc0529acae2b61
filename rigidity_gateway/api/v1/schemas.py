"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Dict, List, Optional


class ScoreBreakdownSchema(BaseModel):
    """Penalty terms behind a cancelability score"""

    contract_penalty: float
    fee_penalty: float
    legal_link_penalty: float
    essential_penalty: float
    substitutability_penalty: float
    notice_penalty: float
    base_score: int
    applied_cap: Optional[int] = None


class ScoreResponse(BaseModel):
    """Response for POST /v1/expenses/score"""

    name: str
    amount: float
    cancelability_score: int
    computed_rigidity: str
    rigidity_effective: str
    warnings: List[str]
    computed_at: datetime
    breakdown: Optional[ScoreBreakdownSchema] = None


class ExpenseResponse(BaseModel):
    """Stored expense with its classification"""

    id: str
    name: str
    amount: float
    intention: str
    contract_months_remaining: int
    notice_days: int
    cancellation_fee_pct: float
    has_legal_link: bool
    essential_obligation: bool
    substitutability: int
    override_rigidity: Optional[str] = None
    override_reason: Optional[str] = None
    cancelability_score: Optional[int] = None
    computed_rigidity: Optional[str] = None
    rigidity_effective: Optional[str] = None
    warnings: List[str] = []
    computed_at: Optional[datetime] = None


class ExpenseListResponse(BaseModel):
    """Response for GET /v1/expenses"""

    user_id: str
    expenses: List[ExpenseResponse]


class ProfileResponse(BaseModel):
    """Response for GET/PUT /v1/profile"""

    user_id: str
    income_floor: float = Field(..., description="Guaranteed minimum monthly income")
    income_is_variable: bool
    dependents: int
    emergency_reserve: float = Field(..., description="Liquid savings")
    debt_service: float = Field(..., description="Monthly debt payments")


class RiskZoneSchema(BaseModel):
    status: str
    label: str


class IntentionBreakdownSchema(BaseModel):
    total: float
    fixed: float
    flexible: float


class TopFixedExpenseSchema(BaseModel):
    id: str
    name: str
    amount: float
    cancelability_score: Optional[int] = None
    impact_pct: Optional[float] = None


class MonthlyReportResponse(BaseModel):
    """Response for GET /v1/summary/month"""

    income_floor: float
    total_expenses: float
    fixed_total: float
    flexible_total: float
    fixed_pct: float
    rigidity_index: float
    dscr: Optional[float] = None
    dscr_status: str
    runway_months: Optional[float] = None
    adaptive_limit_pct: int
    above_adaptive_limit: bool
    fixed_zone: RiskZoneSchema
    overall_risk: RiskZoneSchema
    overall_risk_score: int
    unclassified_count: int
    missing_score_count: int
    by_intention: Dict[str, IntentionBreakdownSchema]
    top_fixed_expenses: List[TopFixedExpenseSchema]
    fixed_growth_warnings: List[str]
    warnings: List[str]


class IncomeDropResponse(BaseModel):
    """Response for GET /v1/simulations/income-drop"""

    income_floor: float
    drop_pct: float
    new_income: float
    fixed_total: float
    deficit: float
    breaks: bool
    coverage_months: Optional[float] = None


class GrowthProjectionResponse(BaseModel):
    """Response for GET /v1/simulations/growth"""

    monthly_contribution: float
    annual_return_pct: float
    target: float
    monthly_rate: float
    months_to_target: int
    years: int
    remaining_months: int
    formatted_time: str
    final_value: float
    total_contributed: float
    total_gains: float
    gains_pct: float
