"""What-if simulators - income drop stress test and compound growth projection"""

import math

from rigidity_gateway.domain.exceptions import InvalidInputError
from rigidity_gateway.domain.models import GrowthProjection, IncomeDropResult, Profile
from rigidity_gateway.utils.date_utils import format_duration_months
from rigidity_gateway.utils.rounding import round_half_up


def simulate_income_drop(profile: Profile, fixed_total: float, drop_pct: float) -> IncomeDropResult:
    """
    Stress test fixed costs against a hypothetical income reduction.

    Args:
        profile: User profile (only income_floor is used)
        fixed_total: Monthly FIXED spending, as aggregated for the monthly report
        drop_pct: Fraction of income lost, in [0, 1]

    Returns:
        IncomeDropResult; breaks is True when fixed costs exceed the reduced
        income. coverage_months is the reduced income over fixed costs
        (0 with no income left, None with no fixed costs).

    Raises:
        InvalidInputError: If drop_pct is outside [0, 1] or fixed_total < 0
    """
    if not 0 <= drop_pct <= 1:
        raise InvalidInputError("drop_pct", "must be between 0 and 1")
    if not fixed_total >= 0:
        raise InvalidInputError("fixed_total", "must be >= 0")

    new_income = profile.income_floor * (1 - drop_pct)
    deficit = fixed_total - new_income

    if new_income <= 0:
        coverage_months = 0.0
    elif fixed_total == 0:
        coverage_months = None
    else:
        coverage_months = round_half_up(new_income / fixed_total, 1)

    return IncomeDropResult(
        income_floor=profile.income_floor,
        drop_pct=drop_pct,
        new_income=round_half_up(new_income, 2),
        fixed_total=round_half_up(fixed_total, 2),
        deficit=round_half_up(deficit, 2),
        breaks=deficit > 0,
        coverage_months=coverage_months,
    )


def monthly_rate_from_annual(annual_return_pct: float) -> float:
    """Equivalent compound monthly rate: (1 + annual)^(1/12) - 1"""
    return (1 + annual_return_pct / 100) ** (1 / 12) - 1


def annuity_future_value(monthly_contribution: float, monthly_rate: float, months: int) -> float:
    """FV = PMT * ((1 + r)^n - 1) / r, or PMT * n at zero rate"""
    if monthly_rate == 0:
        return monthly_contribution * months
    return monthly_contribution * ((1 + monthly_rate) ** months - 1) / monthly_rate


def project_growth(monthly_contribution: float, annual_return_pct: float, target: float) -> GrowthProjection:
    """
    Months of fixed contributions needed to reach a target with compound returns.

    Solves FV = PMT * ((1 + r)^n - 1) / r for n and rounds up to whole
    months, then recomputes the final value for that month count.

    Raises:
        InvalidInputError: If contribution <= 0, return outside [0, 100], target <= 0
            or a target that cannot be reached in a representable number of months
    """
    if not monthly_contribution > 0 or math.isinf(monthly_contribution):
        raise InvalidInputError("monthly_contribution", "must be greater than 0")
    if not 0 <= annual_return_pct <= 100:
        raise InvalidInputError("annual_return_pct", "must be between 0 and 100")
    if not target > 0 or math.isinf(target):
        raise InvalidInputError("target", "must be greater than 0")

    monthly_rate = monthly_rate_from_annual(annual_return_pct)

    if monthly_rate == 0:
        exact_months = target / monthly_contribution
    else:
        exact_months = math.log1p(target * monthly_rate / monthly_contribution) / math.log1p(monthly_rate)
    if not math.isfinite(exact_months):
        raise InvalidInputError("target", "is out of reach with this monthly contribution")
    # A target at or below one contribution is still reached after one month
    months = max(1, math.ceil(exact_months))

    try:
        final_value = annuity_future_value(monthly_contribution, monthly_rate, months)
    except OverflowError:
        final_value = math.inf
    if not math.isfinite(final_value):
        raise InvalidInputError("target", "is out of reach with this monthly contribution")
    total_contributed = monthly_contribution * months
    total_gains = final_value - total_contributed
    years, remaining_months = divmod(months, 12)

    return GrowthProjection(
        monthly_contribution=monthly_contribution,
        annual_return_pct=annual_return_pct,
        target=target,
        monthly_rate=round(monthly_rate, 6),
        months_to_target=months,
        years=years,
        remaining_months=remaining_months,
        formatted_time=format_duration_months(months),
        final_value=round_half_up(final_value, 2),
        total_contributed=round_half_up(total_contributed, 2),
        total_gains=round_half_up(total_gains, 2),
        gains_pct=round_half_up(total_gains / total_contributed * 100, 2),
    )
