"""Rigidity classification - computed vs effective rigidity with anti-bypass override rules"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, List, Tuple

from rigidity_gateway.domain.models import ExpenseAttributes, Rigidity, ScoreResult
from rigidity_gateway.domain.scoring import (
    ACTIVE_CONTRACT_SCORE_CAP,
    LEGAL_LINK_SCORE_CAP,
    calculate_cancelability_score,
)
from rigidity_gateway.domain.validation import validate_expense_attributes
from rigidity_gateway.utils.date_utils import utc_now

Clock = Callable[[], datetime]

ESCAPE_VALVE_MIN_SCORE = 90
FLEXIBLE_MIN_SCORE = 55
LONG_NOTICE_DAYS = 30
MIN_OVERRIDE_REASON_LENGTH = 8

HIGH_FEE_PCT = 50
LONG_CONTRACT_MONTHS = 12
LOW_SUBSTITUTABILITY = 2


@dataclass(frozen=True)
class HardSignals:
    """Contractual/legal attributes that limit cancelability regardless of score"""

    legal_link: bool
    active_contract: bool
    essential_obligation: bool
    long_notice: bool

    @classmethod
    def from_attributes(cls, attrs: ExpenseAttributes) -> "HardSignals":
        return cls(
            legal_link=attrs.has_legal_link,
            active_contract=attrs.contract_months_remaining > 0,
            essential_obligation=attrs.essential_obligation,
            long_notice=attrs.notice_days >= LONG_NOTICE_DAYS,
        )

    @property
    def any(self) -> bool:
        return self.legal_link or self.active_contract or self.essential_obligation or self.long_notice

    @property
    def strong(self) -> bool:
        return self.legal_link or self.active_contract

    def names(self) -> List[str]:
        labels = [
            (self.legal_link, "legal link"),
            (self.active_contract, "active contract"),
            (self.essential_obligation, "essential obligation"),
            (self.long_notice, f"notice period >= {LONG_NOTICE_DAYS} days"),
        ]
        return [label for present, label in labels if present]


class ComputedOutcome(Enum):
    """Step 1: how the system classified the expense, override ignored"""

    HARD_SIGNAL_FIXED = "hard_signal_fixed"
    HIGH_SCORE_EXCEPTION = "high_score_exception"
    LOW_SCORE_FIXED = "low_score_fixed"
    SCORE_FLEXIBLE = "score_flexible"


class OverrideOutcome(Enum):
    """Step 2: what happened to the user's override request"""

    NO_OVERRIDE = "no_override"
    TIGHTENED = "tightened"
    REASON_TOO_SHORT = "reason_too_short"
    BLOCKED_BY_HARD_SIGNALS = "blocked_by_hard_signals"
    HONORED = "honored"


COMPUTED_RIGIDITY = {
    ComputedOutcome.HARD_SIGNAL_FIXED: Rigidity.FIXED,
    ComputedOutcome.HIGH_SCORE_EXCEPTION: Rigidity.FLEXIBLE,
    ComputedOutcome.LOW_SCORE_FIXED: Rigidity.FIXED,
    ComputedOutcome.SCORE_FLEXIBLE: Rigidity.FLEXIBLE,
}

# None means "keep the computed rigidity"
EFFECTIVE_RIGIDITY = {
    OverrideOutcome.NO_OVERRIDE: None,
    OverrideOutcome.TIGHTENED: Rigidity.FIXED,
    OverrideOutcome.REASON_TOO_SHORT: None,
    OverrideOutcome.BLOCKED_BY_HARD_SIGNALS: Rigidity.FIXED,
    OverrideOutcome.HONORED: Rigidity.FLEXIBLE,
}


def compute_outcome(score: int, signals: HardSignals) -> ComputedOutcome:
    if signals.any:
        if score >= ESCAPE_VALVE_MIN_SCORE and not signals.strong:
            return ComputedOutcome.HIGH_SCORE_EXCEPTION
        return ComputedOutcome.HARD_SIGNAL_FIXED
    if score < FLEXIBLE_MIN_SCORE:
        return ComputedOutcome.LOW_SCORE_FIXED
    return ComputedOutcome.SCORE_FLEXIBLE


def override_outcome(attrs: ExpenseAttributes, signals: HardSignals) -> OverrideOutcome:
    if attrs.override_rigidity is None:
        return OverrideOutcome.NO_OVERRIDE
    if attrs.override_rigidity is Rigidity.FIXED:
        return OverrideOutcome.TIGHTENED
    reason = (attrs.override_reason or "").strip()
    if len(reason) < MIN_OVERRIDE_REASON_LENGTH:
        return OverrideOutcome.REASON_TOO_SHORT
    if signals.any:
        return OverrideOutcome.BLOCKED_BY_HARD_SIGNALS
    return OverrideOutcome.HONORED


def _contextual_warnings(attrs: ExpenseAttributes, score: int) -> List[str]:
    warnings = []
    if attrs.cancellation_fee_pct >= HIGH_FEE_PCT:
        warnings.append(
            f"High cancellation fee (>= {HIGH_FEE_PCT}%). Consider waiting for the contract to end."
        )
    if attrs.contract_months_remaining >= LONG_CONTRACT_MONTHS:
        warnings.append(
            f"Long-term contract (>= {LONG_CONTRACT_MONTHS} months remaining). Hard to cancel in the short term."
        )
    if attrs.substitutability <= LOW_SUBSTITUTABILITY:
        warnings.append("Low substitutability. Few alternatives available on the market.")

    if attrs.has_legal_link and score == LEGAL_LINK_SCORE_CAP:
        warnings.append(f"Score capped at {LEGAL_LINK_SCORE_CAP} due to legal link.")
    elif attrs.contract_months_remaining > 0 and score == ACTIVE_CONTRACT_SCORE_CAP and not attrs.has_legal_link:
        warnings.append(f"Score capped at {ACTIVE_CONTRACT_SCORE_CAP} due to active contract.")
    return warnings


def decide(attrs: ExpenseAttributes, score: int) -> Tuple[ComputedOutcome, OverrideOutcome, Rigidity, Rigidity, List[str]]:
    """
    Run the classification decision table.

    Returns (computed outcome, override outcome, computed rigidity,
    effective rigidity, warnings). Warnings are ordered: escape-valve notice,
    override notice, then contextual warnings (fee, contract length,
    substitutability, score cap).
    """
    signals = HardSignals.from_attributes(attrs)
    warnings: List[str] = []

    computed_outcome = compute_outcome(score, signals)
    computed = COMPUTED_RIGIDITY[computed_outcome]
    if computed_outcome is ComputedOutcome.HIGH_SCORE_EXCEPTION:
        warnings.append(
            f"Very high score (>= {ESCAPE_VALVE_MIN_SCORE}) without legal link or active contract. "
            "Classified as FLEXIBLE despite moderate hard signals."
        )

    override = override_outcome(attrs, signals)
    effective = EFFECTIVE_RIGIDITY[override] or computed
    if override is OverrideOutcome.REASON_TOO_SHORT:
        warnings.append(
            f"Override to FLEXIBLE requires a reason of at least {MIN_OVERRIDE_REASON_LENGTH} characters. "
            "Override ignored."
        )
    elif override is OverrideOutcome.BLOCKED_BY_HARD_SIGNALS:
        warnings.append(
            "Override cannot reduce risk while hard signals are present: "
            f"{', '.join(signals.names())}. Kept as FIXED."
        )

    warnings.extend(_contextual_warnings(attrs, score))
    return computed_outcome, override, computed, effective, warnings


def classify_expense(attrs: ExpenseAttributes, score: int, clock: Clock = utc_now) -> ScoreResult:
    """Classify an already-scored expense. Total over valid attributes."""
    _, _, computed, effective, warnings = decide(attrs, score)
    return ScoreResult(
        cancelability_score=score,
        computed_rigidity=computed,
        rigidity_effective=effective,
        warnings=warnings,
        computed_at=clock(),
    )


def score_expense(payload: Any, clock: Clock = utc_now) -> Tuple[ExpenseAttributes, ScoreResult]:
    """
    Main entry point: validate, score and classify one expense payload.

    Raises:
        InvalidInputError: If the payload fails validation (nothing is scored)
    """
    attrs = validate_expense_attributes(payload)
    score = calculate_cancelability_score(attrs)
    return attrs, classify_expense(attrs, score, clock=clock)

