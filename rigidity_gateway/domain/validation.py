"""Input normalization for raw expense and profile payloads"""

from typing import Any, Literal, Optional

from pydantic import (
    BaseModel,
    Field,
    StrictBool,
    StrictStr,
    ValidationError,
    field_validator,
    model_validator,
)

from rigidity_gateway.domain.exceptions import InvalidInputError
from rigidity_gateway.domain.models import ExpenseAttributes, Intention, Profile, Rigidity

MAX_CONTRACT_MONTHS = 1200
MAX_NOTICE_DAYS = 36500
MAX_DEPENDENTS = 100


class _Payload(BaseModel):
    """Shared rules: explicit nulls mean "use the default", whole floats count as integers"""

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


def _whole_float_to_int(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


class ExpenseAttributesRequest(_Payload):
    """Raw expense as sent by clients; classification fields are ignored"""

    name: StrictStr
    amount: float = Field(..., ge=0, strict=True, allow_inf_nan=False)
    intention: Intention = Intention.ESSENTIAL
    contract_months_remaining: int = Field(0, ge=0, le=MAX_CONTRACT_MONTHS, strict=True)
    notice_days: int = Field(0, ge=0, le=MAX_NOTICE_DAYS, strict=True)
    cancellation_fee_pct: float = Field(0.0, ge=0, le=100, strict=True, allow_inf_nan=False)
    has_legal_link: StrictBool = False
    essential_obligation: StrictBool = False
    substitutability: int = Field(5, ge=0, le=10, strict=True)
    override_rigidity: Optional[Literal["FIXED", "FLEXIBLE"]] = None
    override_reason: Optional[StrictStr] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must be a non-empty string")
        return value

    @field_validator("contract_months_remaining", "notice_days", "substitutability", mode="before")
    @classmethod
    def whole_numbers(cls, value: Any) -> Any:
        return _whole_float_to_int(value)


class ProfileRequest(_Payload):
    """Raw profile; every omitted field resets to zero/false"""

    income_floor: float = Field(0.0, ge=0, strict=True, allow_inf_nan=False)
    income_is_variable: StrictBool = False
    dependents: int = Field(0, ge=0, le=MAX_DEPENDENTS, strict=True)
    emergency_reserve: float = Field(0.0, ge=0, strict=True, allow_inf_nan=False)
    debt_service: float = Field(0.0, ge=0, strict=True, allow_inf_nan=False)

    @field_validator("dependents", mode="before")
    @classmethod
    def whole_numbers(cls, value: Any) -> Any:
        return _whole_float_to_int(value)


def _invalid_input(exc: ValidationError) -> InvalidInputError:
    # Report the first violation only; a payload that is not an object has no field
    error = exc.errors()[0]
    field = str(error["loc"][0]) if error["loc"] else "payload"
    return InvalidInputError(field, error["msg"])


def validate_expense_attributes(payload: Any) -> ExpenseAttributes:
    """
    Normalize a raw expense payload into ExpenseAttributes.

    Missing optional fields (or explicit nulls) take their documented
    defaults. Anything else out of range raises InvalidInputError naming the
    offending field, so no score is ever computed from partially valid data.

    Raises:
        InvalidInputError: On the first invalid field
    """
    try:
        request = ExpenseAttributesRequest.model_validate(payload)
    except ValidationError as e:
        raise _invalid_input(e) from e

    return ExpenseAttributes(
        name=request.name,
        amount=request.amount,
        intention=request.intention,
        contract_months_remaining=request.contract_months_remaining,
        notice_days=request.notice_days,
        cancellation_fee_pct=request.cancellation_fee_pct,
        has_legal_link=request.has_legal_link,
        essential_obligation=request.essential_obligation,
        substitutability=request.substitutability,
        override_rigidity=Rigidity(request.override_rigidity) if request.override_rigidity else None,
        override_reason=request.override_reason,
    )


def validate_profile(payload: Any) -> Profile:
    """Normalize a raw profile payload; every amount defaults to 0"""
    try:
        request = ProfileRequest.model_validate(payload)
    except ValidationError as e:
        raise _invalid_input(e) from e

    return Profile(
        income_floor=request.income_floor,
        income_is_variable=request.income_is_variable,
        dependents=request.dependents,
        emergency_reserve=request.emergency_reserve,
        debt_service=request.debt_service,
    )
