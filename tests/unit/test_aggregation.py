"""Unit tests for monthly risk aggregation"""

import pytest
from rigidity_gateway.domain.aggregation import (
    aggregate,
    calculate_adaptive_limit,
    calculate_overall_risk_score,
    counts_as_fixed,
    determine_overall_risk,
    fixed_amount_total,
    get_fixed_zone,
)
from rigidity_gateway.domain.models import (
    ClassifiedExpense,
    Intention,
    Profile,
    Rigidity,
    ZoneStatus,
)


def expense(
    id,
    amount,
    computed=Rigidity.FIXED,
    effective=None,
    score=50,
    intention=Intention.ESSENTIAL,
    name=None,
) -> ClassifiedExpense:
    return ClassifiedExpense(
        id=id,
        name=name or id,
        amount=amount,
        intention=intention,
        cancelability_score=score,
        computed_rigidity=computed,
        rigidity_effective=effective if effective is not None else computed,
    )


@pytest.fixture
def household_expenses():
    return [
        expense("rent", 1500, Rigidity.FIXED, score=30, name="Rent"),
        expense("gym", 100, Rigidity.FLEXIBLE, score=80, intention=Intention.LEISURE, name="Gym"),
        expense("groceries", 800, Rigidity.FLEXIBLE, score=90, name="Groceries"),
        ClassifiedExpense(
            id="legacy",
            name="Legacy",
            amount=200,
            intention=Intention.COMFORT,
            cancelability_score=None,
            computed_rigidity=None,
        ),
    ]


def test_aggregate_household(sample_profile, household_expenses):
    """Test a mixed month with one never-classified expense"""
    report = aggregate(sample_profile, household_expenses)

    assert report.total_expenses == 2600
    assert report.fixed_total == 1700
    assert report.flexible_total == 900
    assert report.essentials_total == 2300
    assert report.fixed_essential_total == 1500
    assert report.fixed_pct == 34.0
    assert report.rigidity_index == 0.44
    assert report.dscr == 5.4
    assert report.dscr_status == "healthy"
    assert report.runway_months == 4.0
    assert report.adaptive_limit_pct == 35
    assert report.above_adaptive_limit is False
    assert report.fixed_zone.status is ZoneStatus.AMARELO
    assert report.overall_risk_score == 2
    assert report.overall_risk.status is ZoneStatus.AMARELO
    assert report.overall_risk.label == "Attention Needed"
    assert report.unclassified_count == 1
    assert report.missing_score_count == 1
    assert report.warnings == [
        "1 expense(s) without a computed classification - treated as FIXED for safety.",
        "1 expense(s) without a cancelability score.",
        "YELLOW zone: fixed costs between 30-40% of income. Attention recommended.",
        "1 expense(s) with a low cancelability score (<40).",
    ]


def test_aggregate_breakdowns(sample_profile, household_expenses):
    report = aggregate(sample_profile, household_expenses)

    assert [(e.id, e.impact_pct) for e in report.top_fixed_expenses] == [("rent", 30.0), ("legacy", 4.0)]
    assert report.by_intention["ESSENTIAL"].total == 2300
    assert report.by_intention["ESSENTIAL"].fixed == 1500
    assert report.by_intention["ESSENTIAL"].flexible == 800
    assert report.by_intention["COMFORT"].fixed == 200
    assert report.by_intention["LEISURE"].flexible == 100
    assert "GROWTH" not in report.by_intention
    assert report.fixed_growth_warnings == [
        "ATTENTION: fixed costs crossed 30% of income - attention zone.",
        "Largest fixed expense (Rent) is more than 15% of income.",
    ]


def test_aggregate_totals_add_up(sample_profile, household_expenses):
    report = aggregate(sample_profile, household_expenses)

    assert report.fixed_total + report.flexible_total == pytest.approx(report.total_expenses)
    assert sum(b.total for b in report.by_intention.values()) == pytest.approx(report.total_expenses)


def test_aggregate_zero_income():
    """Test zero income gives zero ratios instead of failing"""
    report = aggregate(Profile(), [expense("rent", 1000)])

    assert report.fixed_pct == 0.0
    assert report.rigidity_index == 0.0
    assert report.dscr is None
    assert report.dscr_status == "no_debt"
    assert report.runway_months == 0.0
    assert report.top_fixed_expenses[0].impact_pct is None
    assert report.fixed_zone.status is ZoneStatus.OK
    assert "Emergency reserve covers only 0.0 months. Recommended: at least 6 months." in report.warnings


def test_aggregate_empty_month(sample_profile):
    report = aggregate(sample_profile, [])

    assert report.total_expenses == 0
    assert report.fixed_pct == 0.0
    assert report.dscr == 10.0
    assert report.runway_months is None
    assert report.top_fixed_expenses == []
    assert report.overall_risk.status is ZoneStatus.OK
    assert report.warnings == []
    assert report.fixed_growth_warnings == []


def test_aggregate_no_debt(household_expenses):
    report = aggregate(Profile(income_floor=5000, emergency_reserve=6000), household_expenses)

    assert report.dscr is None
    assert report.dscr_status == "no_debt"
    assert not any("DSCR" in w for w in report.warnings)


@pytest.mark.parametrize(
    "essentials, dscr, status, warning",
    [
        (1600, 0.8, "critical", "DSCR below 1: available income does not cover debt service."),
        (1300, 1.4, "tight", "DSCR between 1 and 1.5: thin margin to cover debt."),
        (500, 3.0, "healthy", None),
    ],
)
def test_aggregate_dscr(essentials, dscr, status, warning):
    profile = Profile(income_floor=2000, debt_service=500, emergency_reserve=50000)
    report = aggregate(profile, [expense("food", essentials, Rigidity.FLEXIBLE, score=90)])

    assert report.dscr == dscr
    assert report.dscr_status == status
    if warning:
        assert warning in report.warnings
    else:
        assert not any("DSCR" in w for w in report.warnings)


def test_aggregate_runway_fallback():
    """Test runway uses all essentials when none is FIXED"""
    profile = Profile(income_floor=5000, emergency_reserve=6000)
    report = aggregate(profile, [expense("groceries", 800, Rigidity.FLEXIBLE, score=90)])

    assert report.runway_months == 7.5
    assert report.warnings == [
        "Runway computed with fallback (all essentials) - no essential expense is classified as FIXED."
    ]


def test_aggregate_uses_effective_rigidity():
    """Test an honored override and a tightened one both count as stored"""
    profile = Profile(income_floor=5000)
    report = aggregate(
        profile,
        [
            expense("tightened", 300, Rigidity.FLEXIBLE, effective=Rigidity.FIXED, score=80),
            expense("honored", 200, Rigidity.FIXED, effective=Rigidity.FLEXIBLE, score=45),
        ],
    )

    assert report.fixed_total == 300
    assert report.flexible_total == 200
    assert report.unclassified_count == 0


def test_aggregate_unclassified_is_fixed_even_with_effective_value():
    """Test a missing computed classification cannot be bypassed by an effective value"""
    report = aggregate(
        Profile(income_floor=5000),
        [
            ClassifiedExpense(
                id="odd",
                name="Odd",
                amount=400,
                intention=Intention.LEISURE,
                cancelability_score=95,
                computed_rigidity=None,
                rigidity_effective=Rigidity.FLEXIBLE,
            )
        ],
    )

    assert report.fixed_total == 400
    assert report.flexible_total == 0
    assert report.unclassified_count == 1
    assert report.missing_score_count == 0


def test_aggregate_critical_month():
    """Test every indicator stacking into the red zone"""
    profile = Profile(
        income_floor=2000,
        income_is_variable=True,
        emergency_reserve=1000,
        debt_service=600,
    )
    report = aggregate(profile, [expense("rent", 900, score=20, name="Rent")])

    # fixed 45% (+3), rigidity 0.75 (+2), dscr 1.83 (0), runway 1.1 (+2), above limit (+1)
    assert report.fixed_pct == 45.0
    assert report.rigidity_index == 0.75
    assert report.dscr == 1.83
    assert report.runway_months == 1.1
    assert report.adaptive_limit_pct == 30
    assert report.above_adaptive_limit is True
    assert report.overall_risk_score == 8
    assert report.overall_risk.status is ZoneStatus.VERMELHO
    assert report.overall_risk.label == "Critical"
    assert report.fixed_zone.status is ZoneStatus.VERMELHO
    assert report.warnings == [
        "Emergency reserve covers only 1.1 months. Recommended: at least 6 months.",
        "Fixed costs (45.0%) above the adaptive limit (30%) for your profile.",
        "RED zone: fixed costs are 40%+ of income. Elevated insolvency risk.",
        "1 expense(s) with a low cancelability score (<40).",
    ]
    assert report.fixed_growth_warnings[0] == "ALERT: fixed costs crossed 40% of income - critical risk zone."


def test_aggregate_top_fixed_limit_and_ties():
    """Test top five by amount with ties kept in input order"""
    amounts = [("a", 100), ("b", 300), ("c", 100), ("d", 300), ("e", 50), ("f", 200)]
    report = aggregate(Profile(income_floor=10000), [expense(i, amt) for i, amt in amounts])

    assert [e.id for e in report.top_fixed_expenses] == ["b", "d", "f", "a", "c"]


def test_aggregate_rounding():
    report = aggregate(Profile(income_floor=3000), [expense("rent", 1000, intention=Intention.COMFORT)])

    assert report.fixed_pct == 33.3
    assert report.rigidity_index == 0.333


def test_aggregate_huge_amounts():
    """Test amounts near the float limit produce a report instead of an error"""
    report = aggregate(Profile(income_floor=5000), [expense("yacht", 1e307)])

    assert report.fixed_total == 1e307
    assert report.fixed_pct == pytest.approx(2e305)
    assert report.overall_risk.status is ZoneStatus.VERMELHO


def test_fixed_amount_total_matches_report_rules(household_expenses):
    """Test unclassified expenses count as FIXED and nothing is rounded"""
    expenses = household_expenses + [expense("fee", 0.004)]

    assert fixed_amount_total(expenses) == pytest.approx(1700.004)
    assert aggregate(Profile(income_floor=5000), expenses).fixed_total == 1700.0
    assert fixed_amount_total([]) == 0.0


@pytest.mark.parametrize(
    "computed, effective, expected",
    [
        (Rigidity.FIXED, Rigidity.FIXED, True),
        (Rigidity.FIXED, Rigidity.FLEXIBLE, False),
        (Rigidity.FLEXIBLE, Rigidity.FIXED, True),
        (None, Rigidity.FLEXIBLE, True),
    ],
)
def test_counts_as_fixed(computed, effective, expected):
    item = ClassifiedExpense(
        id="x",
        name="x",
        amount=10,
        intention=Intention.ESSENTIAL,
        cancelability_score=None,
        computed_rigidity=computed,
        rigidity_effective=effective,
    )
    assert counts_as_fixed(item) is expected


@pytest.mark.parametrize(
    "variable, dependents, expected",
    [
        (False, 0, 35),
        (True, 0, 30),
        (True, 2, 28),
        (False, 6, 31),
        (True, 10, 26),
    ],
)
def test_adaptive_limit(variable, dependents, expected):
    assert calculate_adaptive_limit(Profile(income_is_variable=variable, dependents=dependents)) == expected


@pytest.mark.parametrize(
    "fixed_pct, status",
    [(0, ZoneStatus.OK), (29.9, ZoneStatus.OK), (30, ZoneStatus.AMARELO), (40, ZoneStatus.VERMELHO)],
)
def test_fixed_zone(fixed_pct, status):
    assert get_fixed_zone(fixed_pct).status is status


def test_overall_risk_thresholds():
    assert calculate_overall_risk_score(0, 0, None, None, False) == 0
    assert calculate_overall_risk_score(40, 0.6, 0.9, 2, True) == 11
    assert determine_overall_risk(1).status is ZoneStatus.OK
    assert determine_overall_risk(2).status is ZoneStatus.AMARELO
    assert determine_overall_risk(5).status is ZoneStatus.VERMELHO
