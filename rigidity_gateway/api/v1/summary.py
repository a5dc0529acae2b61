"""GET /v1/summary/month - monthly insolvency risk report"""

import time
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from rigidity_gateway.api.v1.schemas import (
    IntentionBreakdownSchema,
    MonthlyReportResponse,
    RiskZoneSchema,
    TopFixedExpenseSchema,
)
from rigidity_gateway.api.dependencies import get_current_user_id, get_request_id
from rigidity_gateway.infrastructure.database.session import get_db
from rigidity_gateway.infrastructure.database.repositories import (
    ExpenseRepository,
    ProfileRepository,
    to_profile,
)
from rigidity_gateway.domain.aggregation import aggregate
from rigidity_gateway.domain.exceptions import NotFoundError
from rigidity_gateway.domain.models import ClassifiedExpense, MonthlyRiskReport, Profile, RiskZone
from rigidity_gateway.infrastructure.observability.metrics import record_report
from rigidity_gateway.infrastructure.observability.logging import log_report_computed

router = APIRouter()


def load_month_inputs(db: Session, user_id: str) -> tuple[Profile, List[ClassifiedExpense]]:
    """
    Read the profile and every stored expense with its classification.

    Raises:
        NotFoundError: If the user has no profile yet
    """
    db_profile = ProfileRepository(db).get_by_user(user_id)
    if db_profile is None:
        raise NotFoundError("Profile not found. Set up your profile first.")

    return to_profile(db_profile), ExpenseRepository(db).list_classified(user_id)


def load_report(db: Session, user_id: str) -> tuple[Profile, MonthlyRiskReport]:
    profile, expenses = load_month_inputs(db, user_id)
    return profile, aggregate(profile, expenses)


def _zone(zone: RiskZone) -> RiskZoneSchema:
    return RiskZoneSchema(status=zone.status.value, label=zone.label)


def to_report_response(report: MonthlyRiskReport) -> MonthlyReportResponse:
    return MonthlyReportResponse(
        income_floor=report.income_floor,
        total_expenses=report.total_expenses,
        fixed_total=report.fixed_total,
        flexible_total=report.flexible_total,
        fixed_pct=report.fixed_pct,
        rigidity_index=report.rigidity_index,
        dscr=report.dscr,
        dscr_status=report.dscr_status,
        runway_months=report.runway_months,
        adaptive_limit_pct=report.adaptive_limit_pct,
        above_adaptive_limit=report.above_adaptive_limit,
        fixed_zone=_zone(report.fixed_zone),
        overall_risk=_zone(report.overall_risk),
        overall_risk_score=report.overall_risk_score,
        unclassified_count=report.unclassified_count,
        missing_score_count=report.missing_score_count,
        by_intention={
            intention: IntentionBreakdownSchema(total=b.total, fixed=b.fixed, flexible=b.flexible)
            for intention, b in report.by_intention.items()
        },
        top_fixed_expenses=[
            TopFixedExpenseSchema(
                id=e.id,
                name=e.name,
                amount=e.amount,
                cancelability_score=e.cancelability_score,
                impact_pct=e.impact_pct,
            )
            for e in report.top_fixed_expenses
        ],
        fixed_growth_warnings=report.fixed_growth_warnings,
        warnings=report.warnings,
    )


@router.get("/summary/month", response_model=MonthlyReportResponse)
def get_month_summary(
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Recompute the monthly risk report from stored data.

    Flow:
    1. Load profile (404 if missing)
    2. Load all expenses with their stored classification
    3. Aggregate totals, ratios and zones
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        _, report = load_report(db, user_id)

        duration_ms = (time.time() - start_time) * 1000
        record_report(report.overall_risk.status.value, report.unclassified_count)
        log_report_computed(
            request_id,
            user_id,
            report.overall_risk.status.value,
            report.fixed_pct,
            report.unclassified_count,
            duration_ms,
        )
        return to_report_response(report)

    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
