"""Expense scoring and CRUD endpoints - classification always happens server-side"""

import time
import uuid
import logging
from typing import Any, Dict
from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from rigidity_gateway.api.v1.schemas import (
    ExpenseListResponse,
    ExpenseResponse,
    ScoreBreakdownSchema,
    ScoreResponse,
)
from rigidity_gateway.api.dependencies import get_clock, get_current_user_id, get_request_id
from rigidity_gateway.infrastructure.database.session import get_db
from rigidity_gateway.infrastructure.database.models import Expense
from rigidity_gateway.infrastructure.database.repositories import ExpenseRepository
from rigidity_gateway.domain.classifier import Clock, HardSignals, override_outcome, score_expense
from rigidity_gateway.domain.exceptions import InvalidInputError, NotFoundError
from rigidity_gateway.domain.models import ExpenseAttributes, ScoreResult
from rigidity_gateway.domain.scoring import score_breakdown
from rigidity_gateway.infrastructure.observability.metrics import record_expense_scored
from rigidity_gateway.infrastructure.observability.logging import log_expense_scored

router = APIRouter()


def invalid_input(e: InvalidInputError) -> HTTPException:
    return HTTPException(status_code=400, detail={"field": e.field, "reason": e.reason})


def to_expense_response(row: Expense) -> ExpenseResponse:
    return ExpenseResponse(
        id=str(row.id),
        name=row.name,
        amount=row.amount,
        intention=row.intention,
        contract_months_remaining=row.contract_months_remaining,
        notice_days=row.notice_days,
        cancellation_fee_pct=row.cancellation_fee_pct,
        has_legal_link=row.has_legal_link,
        essential_obligation=row.essential_obligation,
        substitutability=row.substitutability,
        override_rigidity=row.override_rigidity,
        override_reason=row.override_reason,
        cancelability_score=row.cancelability_score,
        computed_rigidity=row.computed_rigidity,
        rigidity_effective=row.rigidity_effective,
        warnings=row.warnings or [],
        computed_at=row.computed_at,
    )


def _score_and_observe(
    payload: Dict[str, Any], clock: Clock, request_id: str, user_id: str
) -> tuple[ExpenseAttributes, ScoreResult]:
    """Validate + classify, then record metrics and the audit log line"""
    start_time = time.time()
    attrs, result = score_expense(payload, clock=clock)
    outcome = override_outcome(attrs, HardSignals.from_attributes(attrs)).value

    duration_ms = (time.time() - start_time) * 1000
    record_expense_scored(result.rigidity_effective.value, outcome)
    log_expense_scored(
        request_id,
        user_id,
        result.cancelability_score,
        result.computed_rigidity.value,
        result.rigidity_effective.value,
        outcome,
        len(result.warnings),
        duration_ms,
    )
    return attrs, result


def _parse_expense_id(expense_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(expense_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid expense ID format")


@router.post("/expenses/score", response_model=ScoreResponse)
def preview_score(
    request: Request,
    payload: Any = Body(...),
    user_id: str = Depends(get_current_user_id),
    clock: Clock = Depends(get_clock),
):
    """
    Score one expense without persisting it.

    Returns the score, computed and effective rigidity, ordered warnings and
    the penalty breakdown.
    """
    request_id = get_request_id(request)

    try:
        attrs, result = _score_and_observe(payload, clock, request_id, user_id)
        breakdown = score_breakdown(attrs)

        return ScoreResponse(
            name=attrs.name,
            amount=attrs.amount,
            cancelability_score=result.cancelability_score,
            computed_rigidity=result.computed_rigidity.value,
            rigidity_effective=result.rigidity_effective.value,
            warnings=result.warnings,
            computed_at=result.computed_at,
            breakdown=ScoreBreakdownSchema(
                contract_penalty=breakdown.contract_penalty,
                fee_penalty=breakdown.fee_penalty,
                legal_link_penalty=breakdown.legal_link_penalty,
                essential_penalty=breakdown.essential_penalty,
                substitutability_penalty=breakdown.substitutability_penalty,
                notice_penalty=breakdown.notice_penalty,
                base_score=breakdown.base_score,
                applied_cap=breakdown.applied_cap,
            ),
        )

    except InvalidInputError as e:
        logging.warning(f"Invalid expense payload: {e}", extra={"request_id": request_id})
        raise invalid_input(e)

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/expenses", response_model=ExpenseResponse, status_code=201)
def create_expense(
    request: Request,
    payload: Any = Body(...),
    user_id: str = Depends(get_current_user_id),
    clock: Clock = Depends(get_clock),
    db: Session = Depends(get_db),
):
    """
    Validate, score and persist a new expense.

    Any client-supplied score or rigidity fields are ignored; the stored
    classification is always the server's.
    """
    request_id = get_request_id(request)

    try:
        attrs, result = _score_and_observe(payload, clock, request_id, user_id)
        db_expense = ExpenseRepository(db).create(user_id, attrs, result)
        db.commit()
        return to_expense_response(db_expense)

    except InvalidInputError as e:
        db.rollback()
        logging.warning(f"Invalid expense payload: {e}", extra={"request_id": request_id})
        raise invalid_input(e)

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/expenses", response_model=ExpenseListResponse)
def list_expenses(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """List the caller's expenses, newest first"""
    expenses = ExpenseRepository(db).list_by_user(user_id)
    return ExpenseListResponse(
        user_id=user_id,
        expenses=[to_expense_response(row) for row in expenses],
    )


@router.put("/expenses/{expense_id}", response_model=ExpenseResponse)
def update_expense(
    expense_id: str,
    request: Request,
    payload: Any = Body(...),
    user_id: str = Depends(get_current_user_id),
    clock: Clock = Depends(get_clock),
    db: Session = Depends(get_db),
):
    """Replace an expense's attributes and recompute its classification"""
    expense_uuid = _parse_expense_id(expense_id)
    request_id = get_request_id(request)

    try:
        repo = ExpenseRepository(db)
        db_expense = repo.get_for_user(user_id, expense_uuid)
        if db_expense is None:
            raise NotFoundError("Expense not found")

        attrs, result = _score_and_observe(payload, clock, request_id, user_id)
        repo.update(db_expense, attrs, result)
        db.commit()
        return to_expense_response(db_expense)

    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    except InvalidInputError as e:
        db.rollback()
        logging.warning(f"Invalid expense payload: {e}", extra={"request_id": request_id})
        raise invalid_input(e)

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/expenses/{expense_id}", status_code=204)
def delete_expense(
    expense_id: str,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Delete one of the caller's expenses"""
    expense_uuid = _parse_expense_id(expense_id)
    request_id = get_request_id(request)

    try:
        repo = ExpenseRepository(db)
        db_expense = repo.get_for_user(user_id, expense_uuid)
        if db_expense is None:
            raise NotFoundError("Expense not found")

        repo.delete(db_expense)
        db.commit()
        return Response(status_code=204)

    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
