"""GET/PUT /v1/profile - the caller's financial profile"""

import logging
from typing import Any
from fastapi import APIRouter, Body, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from rigidity_gateway.api.v1.schemas import ProfileResponse
from rigidity_gateway.api.dependencies import get_current_user_id, get_request_id
from rigidity_gateway.infrastructure.database.session import get_db
from rigidity_gateway.infrastructure.database.models import UserProfile
from rigidity_gateway.infrastructure.database.repositories import ProfileRepository
from rigidity_gateway.domain.exceptions import InvalidInputError
from rigidity_gateway.domain.validation import validate_profile

router = APIRouter()


def to_profile_response(row: UserProfile) -> ProfileResponse:
    return ProfileResponse(
        user_id=row.user_id,
        income_floor=row.income_floor,
        income_is_variable=row.income_is_variable,
        dependents=row.dependents,
        emergency_reserve=row.emergency_reserve,
        debt_service=row.debt_service,
    )


@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Retrieve the caller's profile; 404 until one has been saved"""
    db_profile = ProfileRepository(db).get_by_user(user_id)
    if not db_profile:
        raise HTTPException(status_code=404, detail="Profile not found. Set up your profile first.")
    return to_profile_response(db_profile)


@router.put("/profile", response_model=ProfileResponse)
def put_profile(
    request: Request,
    payload: Any = Body(...),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Create or replace the caller's profile; omitted fields reset to 0/false"""
    request_id = get_request_id(request)

    try:
        profile = validate_profile(payload)
        db_profile = ProfileRepository(db).upsert(user_id, profile)
        db.commit()
        return to_profile_response(db_profile)

    except InvalidInputError as e:
        db.rollback()
        logging.warning(f"Invalid profile payload: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail={"field": e.field, "reason": e.reason})

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
