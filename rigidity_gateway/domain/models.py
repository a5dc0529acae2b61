"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional


class Intention(str, Enum):
    """Spending purpose, used only for the aggregation breakdown"""

    ESSENTIAL = "ESSENTIAL"
    COMFORT = "COMFORT"
    GROWTH = "GROWTH"
    WEALTH = "WEALTH"
    LEISURE = "LEISURE"


class Rigidity(str, Enum):
    """FIXED: must keep paying. FLEXIBLE: can be cut."""

    FIXED = "FIXED"
    FLEXIBLE = "FLEXIBLE"


class ZoneStatus(str, Enum):
    OK = "OK"
    AMARELO = "AMARELO"
    VERMELHO = "VERMELHO"


@dataclass(frozen=True)
class ExpenseAttributes:
    """Normalized attributes of one recurring expense"""

    name: str
    amount: float
    intention: Intention = Intention.ESSENTIAL
    contract_months_remaining: int = 0
    notice_days: int = 0
    cancellation_fee_pct: float = 0.0
    has_legal_link: bool = False
    essential_obligation: bool = False
    substitutability: int = 5
    override_rigidity: Optional[Rigidity] = None
    override_reason: Optional[str] = None


@dataclass
class ScoreResult:
    """Server-side classification persisted alongside an expense"""

    cancelability_score: int
    computed_rigidity: Rigidity
    rigidity_effective: Rigidity
    warnings: List[str]
    computed_at: datetime


@dataclass(frozen=True)
class Profile:
    """Per-user financial profile"""

    income_floor: float = 0.0
    income_is_variable: bool = False
    dependents: int = 0
    emergency_reserve: float = 0.0
    debt_service: float = 0.0


@dataclass
class ClassifiedExpense:
    """Stored expense as seen by the aggregator (classification may be missing)"""

    id: str
    name: str
    amount: float
    intention: Intention
    cancelability_score: Optional[int]
    computed_rigidity: Optional[Rigidity]
    rigidity_effective: Optional[Rigidity] = None


@dataclass
class RiskZone:
    status: ZoneStatus
    label: str


@dataclass
class IntentionBreakdown:
    total: float = 0.0
    fixed: float = 0.0
    flexible: float = 0.0


@dataclass
class TopFixedExpense:
    id: str
    name: str
    amount: float
    cancelability_score: Optional[int]
    impact_pct: Optional[float]


@dataclass
class MonthlyRiskReport:
    """Monthly projection over a profile and its classified expenses"""

    income_floor: float
    total_expenses: float
    fixed_total: float
    flexible_total: float
    essentials_total: float
    fixed_essential_total: float
    fixed_pct: float
    rigidity_index: float
    dscr: Optional[float]
    dscr_status: str
    runway_months: Optional[float]
    adaptive_limit_pct: int
    above_adaptive_limit: bool
    fixed_zone: RiskZone
    overall_risk: RiskZone
    overall_risk_score: int
    unclassified_count: int
    missing_score_count: int
    by_intention: Dict[str, IntentionBreakdown] = field(default_factory=dict)
    top_fixed_expenses: List[TopFixedExpense] = field(default_factory=list)
    fixed_growth_warnings: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass
class IncomeDropResult:
    income_floor: float
    drop_pct: float
    new_income: float
    fixed_total: float
    deficit: float
    breaks: bool
    coverage_months: Optional[float]


@dataclass
class GrowthProjection:
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
