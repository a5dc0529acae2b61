"""Unit tests for expense and profile payload validation"""

import pytest
from rigidity_gateway.domain.exceptions import InvalidInputError
from rigidity_gateway.domain.models import Intention, Rigidity
from rigidity_gateway.domain.validation import validate_expense_attributes, validate_profile


def test_validate_expense_defaults():
    """Test optional fields take their documented defaults"""
    attrs = validate_expense_attributes({"name": "Internet", "amount": 120})

    assert attrs.name == "Internet"
    assert attrs.amount == 120.0
    assert attrs.intention is Intention.ESSENTIAL
    assert attrs.contract_months_remaining == 0
    assert attrs.notice_days == 0
    assert attrs.cancellation_fee_pct == 0.0
    assert attrs.has_legal_link is False
    assert attrs.essential_obligation is False
    assert attrs.substitutability == 5
    assert attrs.override_rigidity is None
    assert attrs.override_reason is None


def test_validate_expense_nulls_mean_defaults():
    """Test explicit nulls behave like missing fields"""
    attrs = validate_expense_attributes(
        {
            "name": "Gym",
            "amount": 0,
            "contract_months_remaining": None,
            "substitutability": None,
            "has_legal_link": None,
            "override_rigidity": None,
        }
    )

    assert attrs.amount == 0.0
    assert attrs.contract_months_remaining == 0
    assert attrs.substitutability == 5
    assert attrs.has_legal_link is False


def test_validate_expense_full_payload():
    """Test every field is carried over and the name is trimmed"""
    attrs = validate_expense_attributes(
        {
            "name": "  Rent  ",
            "amount": 1500.5,
            "intention": "COMFORT",
            "contract_months_remaining": 6.0,
            "notice_days": 30,
            "cancellation_fee_pct": 12.5,
            "has_legal_link": True,
            "essential_obligation": True,
            "substitutability": 0,
            "override_rigidity": "FLEXIBLE",
            "override_reason": "Moving out next month",
        }
    )

    assert attrs.name == "Rent"
    assert attrs.intention is Intention.COMFORT
    assert attrs.contract_months_remaining == 6
    assert isinstance(attrs.contract_months_remaining, int)
    assert attrs.cancellation_fee_pct == 12.5
    assert attrs.override_rigidity is Rigidity.FLEXIBLE
    assert attrs.override_reason == "Moving out next month"


@pytest.mark.parametrize(
    "payload, field",
    [
        ({"amount": 10}, "name"),
        ({"name": "   ", "amount": 10}, "name"),
        ({"name": 42, "amount": 10}, "name"),
        ({"name": "x"}, "amount"),
        ({"name": "x", "amount": -1}, "amount"),
        ({"name": "x", "amount": "100"}, "amount"),
        ({"name": "x", "amount": True}, "amount"),
        ({"name": "x", "amount": float("nan")}, "amount"),
        ({"name": "x", "amount": 1, "contract_months_remaining": -1}, "contract_months_remaining"),
        ({"name": "x", "amount": 1, "contract_months_remaining": 1.5}, "contract_months_remaining"),
        ({"name": "x", "amount": 1, "notice_days": -3}, "notice_days"),
        ({"name": "x", "amount": 1, "cancellation_fee_pct": 100.1}, "cancellation_fee_pct"),
        ({"name": "x", "amount": 1, "cancellation_fee_pct": -0.1}, "cancellation_fee_pct"),
        ({"name": "x", "amount": 1, "substitutability": 11}, "substitutability"),
        ({"name": "x", "amount": 1, "substitutability": 2.5}, "substitutability"),
        ({"name": "x", "amount": 1, "has_legal_link": "yes"}, "has_legal_link"),
        ({"name": "x", "amount": 1, "essential_obligation": 1}, "essential_obligation"),
        ({"name": "x", "amount": 1, "intention": "HOBBY"}, "intention"),
        ({"name": "x", "amount": 1, "override_rigidity": "fixed"}, "override_rigidity"),
        ({"name": "x", "amount": 1, "override_rigidity": "FIXO"}, "override_rigidity"),
        ({"name": "x", "amount": 1, "override_reason": 123}, "override_reason"),
    ],
)
def test_validate_expense_rejects_invalid_field(payload, field):
    """Test each violation names the offending field"""
    with pytest.raises(InvalidInputError) as exc_info:
        validate_expense_attributes(payload)

    assert exc_info.value.field == field
    assert exc_info.value.reason


def test_validate_expense_rejects_non_object():
    """Test a non-mapping payload is rejected as a whole"""
    with pytest.raises(InvalidInputError) as exc_info:
        validate_expense_attributes(["name", "amount"])

    assert exc_info.value.field == "payload"


def test_validate_expense_boundaries_accepted():
    """Test inclusive range limits"""
    attrs = validate_expense_attributes(
        {"name": "x", "amount": 0, "cancellation_fee_pct": 100, "substitutability": 10}
    )
    assert attrs.cancellation_fee_pct == 100.0
    assert attrs.substitutability == 10


@pytest.mark.parametrize(
    "field, value",
    [
        ("notice_days", 10**400),
        ("notice_days", 36501),
        ("contract_months_remaining", 10**20),
        ("contract_months_remaining", 1201),
        ("amount", float("inf")),
        ("cancellation_fee_pct", float("-inf")),
    ],
)
def test_validate_expense_rejects_unbounded_values(field, value):
    """Test values too large to score or store are rejected before scoring"""
    with pytest.raises(InvalidInputError) as exc_info:
        validate_expense_attributes({"name": "x", "amount": 1, field: value})

    assert exc_info.value.field == field


def test_validate_expense_upper_bounds_accepted():
    attrs = validate_expense_attributes(
        {"name": "x", "amount": 1, "notice_days": 36500, "contract_months_remaining": 1200}
    )
    assert attrs.notice_days == 36500
    assert attrs.contract_months_remaining == 1200


def test_validate_expense_reason_describes_violation():
    with pytest.raises(InvalidInputError) as exc_info:
        validate_expense_attributes({"name": "x", "amount": 1, "cancellation_fee_pct": 150})

    assert exc_info.value.reason == "Input should be less than or equal to 100"


def test_validate_expense_ignores_unknown_keys():
    """Test client-side classification fields never reach the attributes"""
    attrs = validate_expense_attributes(
        {"name": "x", "amount": 1, "cancelability_score": 99, "rigidity_effective": "FLEXIBLE"}
    )
    assert not hasattr(attrs, "cancelability_score")
    assert attrs.override_rigidity is None


def test_validate_profile_defaults_and_values():
    """Test profile normalization"""
    assert validate_profile({}).income_floor == 0.0

    profile = validate_profile(
        {
            "income_floor": 4200,
            "income_is_variable": True,
            "dependents": 2,
            "emergency_reserve": 10000,
            "debt_service": 350.75,
        }
    )
    assert profile.income_floor == 4200.0
    assert profile.income_is_variable is True
    assert profile.dependents == 2
    assert profile.debt_service == 350.75


@pytest.mark.parametrize(
    "payload, field",
    [
        ({"income_floor": -1}, "income_floor"),
        ({"dependents": 1.5}, "dependents"),
        ({"dependents": -1}, "dependents"),
        ({"emergency_reserve": "lots"}, "emergency_reserve"),
        ({"debt_service": -0.01}, "debt_service"),
        ({"income_is_variable": "no"}, "income_is_variable"),
        ({"dependents": 10**30}, "dependents"),
        ({"income_floor": float("inf")}, "income_floor"),
    ],
)
def test_validate_profile_rejects_invalid_field(payload, field):
    with pytest.raises(InvalidInputError) as exc_info:
        validate_profile(payload)

    assert exc_info.value.field == field
