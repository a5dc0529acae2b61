"""Monthly risk aggregation - fixed-cost ratio, DSCR, runway and risk zones"""

from typing import Dict, Iterable, List, Optional

from rigidity_gateway.domain.models import (
    ClassifiedExpense,
    IntentionBreakdown,
    Intention,
    MonthlyRiskReport,
    Profile,
    Rigidity,
    RiskZone,
    TopFixedExpense,
    ZoneStatus,
)
from rigidity_gateway.utils.rounding import round_half_up, round_optional

TOP_FIXED_LIMIT = 5
LOW_SCORE_THRESHOLD = 40
LARGEST_FIXED_SHARE = 0.15
MIN_RUNWAY_MONTHS = 3


def calculate_adaptive_limit(profile: Profile) -> int:
    """
    Personalized ceiling for fixed costs as % of income.

    Base 35%, minus 5pp for variable income, minus 1pp per dependent (up to
    4), clamped to [25, 38].
    """
    limit = 35
    if profile.income_is_variable:
        limit -= 5
    limit -= min(profile.dependents, 4)
    return max(25, min(38, limit))


def get_fixed_zone(fixed_pct: float) -> RiskZone:
    if fixed_pct >= 40:
        return RiskZone(ZoneStatus.VERMELHO, "High Risk")
    elif fixed_pct >= 30:
        return RiskZone(ZoneStatus.AMARELO, "Attention")
    return RiskZone(ZoneStatus.OK, "Healthy")


def calculate_overall_risk_score(
    fixed_pct: float,
    rigidity_index: float,
    dscr: Optional[float],
    runway_months: Optional[float],
    above_adaptive_limit: bool,
) -> int:
    """
    Accumulate risk points across indicators.

    - fixed_pct: >= 40 → +3, >= 30 → +1
    - rigidity_index: >= 0.6 → +2, >= 0.45 → +1
    - dscr (when defined): < 1 → +3, < 1.5 → +1
    - runway (when defined): < 3 → +2, < 6 → +1
    - above adaptive limit → +1
    """
    risk_score = 0

    if fixed_pct >= 40:
        risk_score += 3
    elif fixed_pct >= 30:
        risk_score += 1

    if rigidity_index >= 0.6:
        risk_score += 2
    elif rigidity_index >= 0.45:
        risk_score += 1

    if dscr is not None:
        if dscr < 1:
            risk_score += 3
        elif dscr < 1.5:
            risk_score += 1

    if runway_months is not None:
        if runway_months < 3:
            risk_score += 2
        elif runway_months < 6:
            risk_score += 1

    if above_adaptive_limit:
        risk_score += 1

    return risk_score


def determine_overall_risk(risk_score: int) -> RiskZone:
    if risk_score >= 5:
        return RiskZone(ZoneStatus.VERMELHO, "Critical")
    elif risk_score >= 2:
        return RiskZone(ZoneStatus.AMARELO, "Attention Needed")
    return RiskZone(ZoneStatus.OK, "Healthy")


def resolve_rigidity(expense: ClassifiedExpense) -> Optional[Rigidity]:
    """Stored classification for aggregation; None when never classified"""
    if expense.computed_rigidity is None:
        return None
    return expense.rigidity_effective or expense.computed_rigidity


def counts_as_fixed(expense: ClassifiedExpense) -> bool:
    """Unclassified expenses count as FIXED"""
    rigidity = resolve_rigidity(expense)
    return rigidity is None or rigidity is Rigidity.FIXED


def fixed_amount_total(expenses: Iterable[ClassifiedExpense]) -> float:
    """Unrounded monthly FIXED spending, summed the same way as in the report"""
    return sum((expense.amount for expense in expenses if counts_as_fixed(expense)), 0.0)


def aggregate(profile: Profile, expenses: Iterable[ClassifiedExpense]) -> MonthlyRiskReport:
    """
    Build the monthly risk report from a profile and its classified expenses.

    Rigidity is read from the stored classification, never re-derived from
    the score. An expense with no stored classification counts as FIXED and
    is reported in the warnings, so incomplete records can only raise the
    assessed risk.

    Never raises for zero income, zero debt or an empty expense list;
    undefined ratios come back as None or 0 with a warning where relevant.
    """
    income_floor = profile.income_floor
    debt_service = profile.debt_service
    warnings: List[str] = []

    total_expenses = 0.0
    fixed_total = 0.0
    flexible_total = 0.0
    essentials_total = 0.0
    fixed_essential_total = 0.0
    unclassified_count = 0
    missing_score_count = 0
    low_score_count = 0
    by_intention: Dict[str, IntentionBreakdown] = {}
    fixed_candidates: List[TopFixedExpense] = []

    for expense in expenses:
        amount = expense.amount
        total_expenses += amount

        if resolve_rigidity(expense) is None:
            unclassified_count += 1
        is_fixed = counts_as_fixed(expense)

        if expense.cancelability_score is None:
            missing_score_count += 1
        elif expense.cancelability_score < LOW_SCORE_THRESHOLD:
            low_score_count += 1

        if is_fixed:
            fixed_total += amount
            fixed_candidates.append(
                TopFixedExpense(
                    id=expense.id,
                    name=expense.name,
                    amount=amount,
                    cancelability_score=expense.cancelability_score,
                    impact_pct=round_half_up(amount / income_floor * 100, 1) if income_floor > 0 else None,
                )
            )
        else:
            flexible_total += amount

        if expense.intention is Intention.ESSENTIAL:
            essentials_total += amount
            if is_fixed:
                fixed_essential_total += amount

        breakdown = by_intention.setdefault(expense.intention.value, IntentionBreakdown())
        breakdown.total += amount
        if is_fixed:
            breakdown.fixed += amount
        else:
            breakdown.flexible += amount

    if unclassified_count > 0:
        warnings.append(
            f"{unclassified_count} expense(s) without a computed classification - treated as FIXED for safety."
        )
    if missing_score_count > 0:
        warnings.append(f"{missing_score_count} expense(s) without a cancelability score.")

    # sorted() is stable, ties keep their input order
    top_fixed_expenses = sorted(fixed_candidates, key=lambda e: e.amount, reverse=True)[:TOP_FIXED_LIMIT]

    fixed_pct = fixed_total / income_floor * 100 if income_floor > 0 else 0.0
    rigidity_index = (fixed_total + debt_service) / income_floor if income_floor > 0 else 0.0

    dscr: Optional[float] = None
    dscr_status = "no_debt"
    if debt_service > 0:
        dscr = (income_floor - essentials_total) / debt_service
        if dscr < 1:
            dscr_status = "critical"
            warnings.append("DSCR below 1: available income does not cover debt service.")
        elif dscr < 1.5:
            dscr_status = "tight"
            warnings.append("DSCR between 1 and 1.5: thin margin to cover debt.")
        else:
            dscr_status = "healthy"

    runway_base = fixed_essential_total
    if fixed_essential_total == 0 and essentials_total > 0:
        runway_base = essentials_total
        warnings.append(
            "Runway computed with fallback (all essentials) - no essential expense is classified as FIXED."
        )
    runway_months = profile.emergency_reserve / runway_base if runway_base > 0 else None
    if runway_months is not None and runway_months < MIN_RUNWAY_MONTHS:
        warnings.append(
            f"Emergency reserve covers only {round_half_up(runway_months, 1):.1f} months. "
            "Recommended: at least 6 months."
        )

    adaptive_limit_pct = calculate_adaptive_limit(profile)
    above_adaptive_limit = fixed_pct > adaptive_limit_pct
    if above_adaptive_limit:
        warnings.append(
            f"Fixed costs ({round_half_up(fixed_pct, 1):.1f}%) above the adaptive limit "
            f"({adaptive_limit_pct}%) for your profile."
        )

    fixed_zone = get_fixed_zone(fixed_pct)
    if fixed_zone.status is ZoneStatus.VERMELHO:
        warnings.append("RED zone: fixed costs are 40%+ of income. Elevated insolvency risk.")
    elif fixed_zone.status is ZoneStatus.AMARELO:
        warnings.append("YELLOW zone: fixed costs between 30-40% of income. Attention recommended.")

    overall_risk_score = calculate_overall_risk_score(
        fixed_pct, rigidity_index, dscr, runway_months, above_adaptive_limit
    )
    overall_risk = determine_overall_risk(overall_risk_score)

    if low_score_count > 0:
        warnings.append(
            f"{low_score_count} expense(s) with a low cancelability score (<{LOW_SCORE_THRESHOLD})."
        )

    fixed_growth_warnings: List[str] = []
    if fixed_pct >= 40:
        fixed_growth_warnings.append("ALERT: fixed costs crossed 40% of income - critical risk zone.")
    elif fixed_pct >= 30:
        fixed_growth_warnings.append("ATTENTION: fixed costs crossed 30% of income - attention zone.")
    if top_fixed_expenses and top_fixed_expenses[0].amount > income_floor * LARGEST_FIXED_SHARE:
        fixed_growth_warnings.append(
            f"Largest fixed expense ({top_fixed_expenses[0].name}) is more than 15% of income."
        )

    return MonthlyRiskReport(
        income_floor=round_half_up(income_floor, 2),
        total_expenses=round_half_up(total_expenses, 2),
        fixed_total=round_half_up(fixed_total, 2),
        flexible_total=round_half_up(flexible_total, 2),
        essentials_total=round_half_up(essentials_total, 2),
        fixed_essential_total=round_half_up(fixed_essential_total, 2),
        fixed_pct=round_half_up(fixed_pct, 1),
        rigidity_index=round_half_up(rigidity_index, 3),
        dscr=round_optional(dscr, 2),
        dscr_status=dscr_status,
        runway_months=round_optional(runway_months, 1),
        adaptive_limit_pct=adaptive_limit_pct,
        above_adaptive_limit=above_adaptive_limit,
        fixed_zone=fixed_zone,
        overall_risk=overall_risk,
        overall_risk_score=overall_risk_score,
        unclassified_count=unclassified_count,
        missing_score_count=missing_score_count,
        by_intention={
            key: IntentionBreakdown(
                total=round_half_up(b.total, 2),
                fixed=round_half_up(b.fixed, 2),
                flexible=round_half_up(b.flexible, 2),
            )
            for key, b in by_intention.items()
        },
        top_fixed_expenses=top_fixed_expenses,
        fixed_growth_warnings=fixed_growth_warnings,
        warnings=warnings,
    )
