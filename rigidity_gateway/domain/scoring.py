"""Cancelability scoring engine - how easily a single expense can be eliminated"""

from dataclasses import dataclass
from typing import Optional

from rigidity_gateway.domain.models import ExpenseAttributes
from rigidity_gateway.utils.rounding import round_half_up

MAX_SCORE = 100

CONTRACT_PENALTY_PER_MONTH = 2
CONTRACT_PENALTY_CAP = 30
FEE_PENALTY_DIVISOR = 4
FEE_PENALTY_CAP = 25
LEGAL_LINK_PENALTY = 20
ESSENTIAL_OBLIGATION_PENALTY = 15
SUBSTITUTABILITY_PENALTY_PER_POINT = 2
SUBSTITUTABILITY_PENALTY_CAP = 20
NOTICE_PENALTY_DIVISOR = 3
NOTICE_PENALTY_CAP = 10

LEGAL_LINK_SCORE_CAP = 50
ACTIVE_CONTRACT_SCORE_CAP = 60


@dataclass(frozen=True)
class ScoreBreakdown:
    """Individual penalty terms and the caps that shaped the final score"""

    contract_penalty: float
    fee_penalty: float
    legal_link_penalty: float
    essential_penalty: float
    substitutability_penalty: float
    notice_penalty: float
    base_score: int
    score: int
    applied_cap: Optional[int]

    @property
    def total_penalty(self) -> float:
        return (
            self.contract_penalty
            + self.fee_penalty
            + self.legal_link_penalty
            + self.essential_penalty
            + self.substitutability_penalty
            + self.notice_penalty
        )


def score_breakdown(attrs: ExpenseAttributes) -> ScoreBreakdown:
    """
    Compute the cancelability score with every term exposed.

    Starts at 100 (trivially cancelable) and subtracts independent penalties,
    each capped on its own:
    - contract: 2 points per remaining month, max 30
    - cancellation fee: fee% / 4, max 25
    - legal link: flat 20
    - essential obligation: flat 15
    - low substitutability: (10 - substitutability) * 2, max 20
    - notice period: days / 3, max 10

    The result is rounded (halves up) and clamped to [0, 100]. Hard caps are
    applied afterwards and can only lower the score: a legally binding expense
    never scores above 50, an active contract never above 60.
    """
    contract_penalty = min(
        CONTRACT_PENALTY_CAP, attrs.contract_months_remaining * CONTRACT_PENALTY_PER_MONTH
    )
    fee_penalty = min(FEE_PENALTY_CAP, attrs.cancellation_fee_pct / FEE_PENALTY_DIVISOR)
    legal_link_penalty = LEGAL_LINK_PENALTY if attrs.has_legal_link else 0
    essential_penalty = ESSENTIAL_OBLIGATION_PENALTY if attrs.essential_obligation else 0
    substitutability_penalty = min(
        SUBSTITUTABILITY_PENALTY_CAP,
        max(0, (10 - attrs.substitutability) * SUBSTITUTABILITY_PENALTY_PER_POINT),
    )
    # Cap the days before dividing so arbitrarily large integers stay in float range
    notice_days = min(attrs.notice_days, NOTICE_PENALTY_CAP * NOTICE_PENALTY_DIVISOR)
    notice_penalty = notice_days / NOTICE_PENALTY_DIVISOR

    raw = MAX_SCORE - (
        contract_penalty
        + fee_penalty
        + legal_link_penalty
        + essential_penalty
        + substitutability_penalty
        + notice_penalty
    )
    base_score = int(max(0, min(MAX_SCORE, round_half_up(raw))))

    # Hard caps: applied after clamping, never raise the score
    score = base_score
    applied_cap = None
    if attrs.contract_months_remaining > 0 and score > ACTIVE_CONTRACT_SCORE_CAP:
        score = ACTIVE_CONTRACT_SCORE_CAP
        applied_cap = ACTIVE_CONTRACT_SCORE_CAP
    if attrs.has_legal_link and score > LEGAL_LINK_SCORE_CAP:
        score = LEGAL_LINK_SCORE_CAP
        applied_cap = LEGAL_LINK_SCORE_CAP

    return ScoreBreakdown(
        contract_penalty=contract_penalty,
        fee_penalty=fee_penalty,
        legal_link_penalty=legal_link_penalty,
        essential_penalty=essential_penalty,
        substitutability_penalty=substitutability_penalty,
        notice_penalty=notice_penalty,
        base_score=base_score,
        score=score,
        applied_cap=applied_cap,
    )


def calculate_cancelability_score(attrs: ExpenseAttributes) -> int:
    """Integer score in [0, 100]; lower means harder to cancel"""
    return score_breakdown(attrs).score
