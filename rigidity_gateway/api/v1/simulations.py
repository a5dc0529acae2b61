"""GET /v1/simulations/* - read-only what-if scenarios"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from rigidity_gateway.api.v1.schemas import GrowthProjectionResponse, IncomeDropResponse
from rigidity_gateway.api.v1.summary import load_month_inputs
from rigidity_gateway.api.dependencies import get_current_user_id, get_request_id
from rigidity_gateway.config import settings
from rigidity_gateway.infrastructure.database.session import get_db
from rigidity_gateway.domain.aggregation import fixed_amount_total
from rigidity_gateway.domain.exceptions import InvalidInputError, NotFoundError
from rigidity_gateway.domain.simulations import project_growth, simulate_income_drop
from rigidity_gateway.infrastructure.observability.metrics import simulation_counter

router = APIRouter()


@router.get("/simulations/income-drop", response_model=IncomeDropResponse)
def get_income_drop(
    request: Request,
    drop_pct: Optional[float] = Query(None, description="Fraction of income lost, 0 to 1"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Stress test the caller's fixed costs against an income drop.

    Fixed costs are summed with the same rules as the monthly report, so
    unclassified expenses count as FIXED here too. The total is compared
    unrounded; only the response fields are rounded.
    """
    request_id = get_request_id(request)
    if drop_pct is None:
        drop_pct = settings.default_drop_pct

    try:
        profile, expenses = load_month_inputs(db, user_id)
        result = simulate_income_drop(profile, fixed_amount_total(expenses), drop_pct)
        simulation_counter.labels(kind="income_drop").inc()

        return IncomeDropResponse(
            income_floor=result.income_floor,
            drop_pct=result.drop_pct,
            new_income=result.new_income,
            fixed_total=result.fixed_total,
            deficit=result.deficit,
            breaks=result.breaks,
            coverage_months=result.coverage_months,
        )

    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail={"field": e.field, "reason": e.reason})

    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/simulations/growth", response_model=GrowthProjectionResponse)
def get_growth_projection(
    request: Request,
    monthly_contribution: float = Query(..., description="Amount invested every month"),
    annual_return_pct: Optional[float] = Query(None, description="Expected annual return, 0 to 100"),
    target: Optional[float] = Query(None, description="Wealth target"),
    user_id: str = Depends(get_current_user_id),
):
    """Months of compound monthly contributions needed to reach a target"""
    request_id = get_request_id(request)
    if annual_return_pct is None:
        annual_return_pct = settings.default_annual_return_pct
    if target is None:
        target = settings.default_growth_target

    try:
        projection = project_growth(monthly_contribution, annual_return_pct, target)
        simulation_counter.labels(kind="growth").inc()

        return GrowthProjectionResponse(
            monthly_contribution=projection.monthly_contribution,
            annual_return_pct=projection.annual_return_pct,
            target=projection.target,
            monthly_rate=projection.monthly_rate,
            months_to_target=projection.months_to_target,
            years=projection.years,
            remaining_months=projection.remaining_months,
            formatted_time=projection.formatted_time,
            final_value=projection.final_value,
            total_contributed=projection.total_contributed,
            total_gains=projection.total_gains,
            gains_pct=projection.gains_pct,
        )

    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail={"field": e.field, "reason": e.reason})

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
