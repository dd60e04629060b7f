from decimal import Decimal

import pytest
from hypothesis import given, strategies as st

from propath.domain.errors import InvalidArgumentError
from propath.domain.property import PropertyRecord
from propath.domain.simulation import FinancingAssumptions, prepare_candidate, simulate

from fixtures.portfolios import candidate_250k, financing, rental_300k

D = Decimal


def test_simulation_concrete_scenario():
    current = [rental_300k()]
    result = simulate(current, candidate_250k(), financing("50000"))

    assert result.current.total_equity == D("100000")
    assert result.projected.total_equity == D("350000")
    assert result.projected.property_count == 2

    assert result.cap_rate == D("6.72")
    assert result.cash_on_cash_return == D("33.6")

    assert result.total_value_change == D("250000")
    assert result.total_debt_change == D("0")
    assert result.total_equity_change == D("250000")
    assert result.monthly_cash_flow_change == D("1400")

    # current 1500*12/300000 = 6.00, projected 2900*12/550000 -> 6.33
    assert result.current.annual_return == D("6")
    assert result.projected.annual_return == D("6.33")
    assert result.annual_return_change == D("0.33")

    # 200000 / 34800
    assert result.debt_to_income_ratio == D("5.7471")


def test_candidate_with_zero_value_has_zero_cap_rate():
    candidate = candidate_250k().with_changes(current_value=D("0"))
    result = simulate([rental_300k()], candidate, financing("50000"))
    assert result.cap_rate == D("0")


def test_zero_down_payment_gives_zero_cash_on_cash():
    result = simulate([rental_300k()], candidate_250k(), financing("0"))
    assert result.cash_on_cash_return == D("0")


def test_missing_down_payment_is_invalid_argument():
    with pytest.raises(InvalidArgumentError) as exc:
        simulate([rental_300k()], candidate_250k(), FinancingAssumptions())
    assert exc.value.details == {"field": "down_payment"}


def test_simulating_against_empty_portfolio():
    result = simulate([], candidate_250k(), financing("50000"))
    assert result.current.total_value == 0
    assert result.current.annual_return == 0
    assert result.projected.total_value == D("250000")
    # 1400 * 12 / 250000 = 0.0672
    assert result.annual_return_change == D("6.72")


def test_zero_projected_cash_flow_gives_zero_debt_to_income():
    current = [PropertyRecord(current_value=100000, mortgage_amount=50000, monthly_rent=0, monthly_expenses=0)]
    candidate = PropertyRecord(current_value=100000, monthly_rent=0)
    result = simulate(current, candidate, financing("10000"))
    assert result.debt_to_income_ratio == D("0")


def test_simulation_never_mutates_current_properties():
    current = [rental_300k()]
    saved = list(current)

    simulate(current, candidate_250k(), financing("50000"))

    assert current == saved
    assert len(current) == 1


def test_candidate_debt_service_from_financing():
    """
    200k mortgage at 6% over 360 months -> 1199.10/mo debt service.
    """
    candidate = PropertyRecord(
        current_value=250000,
        mortgage_amount=200000,
        monthly_rent=1800,
        monthly_expenses=400,
    )
    fin = financing("50000", interest_rate="6", loan_term_months=360)

    prepared = prepare_candidate(candidate, fin)
    assert prepared.monthly_debt_service == D("1199.10")
    assert prepared.monthly_cash_flow == D("200.90")

    result = simulate([rental_300k()], candidate, fin)
    assert result.candidate.monthly_cash_flow == D("200.90")
    # cap rate ignores financing
    assert result.cap_rate == D("6.72")


def test_candidate_expenses_estimated_from_rates_when_omitted():
    candidate = PropertyRecord(current_value=240000, monthly_rent=2000)
    fin = financing(
        "48000",
        property_tax_rate="1.2",
        insurance_rate="0.5",
        maintenance_rate="1.0",
        vacancy_rate="5%",
        management_rate="8",
    )
    prepared = prepare_candidate(candidate, fin)
    assert prepared.monthly_expenses == D("800.00")
    assert prepared.monthly_cash_flow == D("1200.00")


def test_supplied_candidate_fields_are_not_overridden():
    candidate = PropertyRecord(
        current_value=240000,
        mortgage_amount=100000,
        monthly_rent=2000,
        monthly_expenses=300,
        monthly_debt_service=700,
    )
    fin = financing("48000", interest_rate="6", loan_term_months=360, vacancy_rate="5")
    assert prepare_candidate(candidate, fin) is candidate


def test_explicit_candidate_cash_flow_survives_preparation():
    candidate = PropertyRecord(current_value=240000, monthly_rent=2000, monthly_cash_flow=999)
    fin = financing("48000", vacancy_rate="5")
    prepared = prepare_candidate(candidate, fin)
    assert prepared.monthly_expenses == D("100.00")
    assert prepared.monthly_cash_flow == D("999.00")


def test_negative_financing_inputs_are_rejected():
    with pytest.raises(ValueError):
        FinancingAssumptions(down_payment=-1)
    with pytest.raises(ValueError):
        FinancingAssumptions(down_payment=1, loan_term_months=0)


@given(
    values=st.lists(st.decimals(min_value=0, max_value=5_000_000, places=2), max_size=8),
    candidate_value=st.decimals(min_value=0, max_value=5_000_000, places=2),
)
def test_projection_adds_exactly_the_candidate(values, candidate_value):
    current = [PropertyRecord(current_value=v, mortgage_amount=v / 2) for v in values]
    saved = list(current)
    candidate = PropertyRecord(current_value=candidate_value)

    result = simulate(current, candidate, financing("1"))

    assert current == saved
    assert result.projected.property_count == len(values) + 1
    assert result.total_value_change == result.candidate.current_value
    assert result.projected.total_equity == result.projected.total_value - result.projected.total_debt


def test_non_finite_financing_inputs_are_rejected():
    with pytest.raises(ValueError):
        FinancingAssumptions(down_payment="NaN")
    with pytest.raises(ValueError):
        FinancingAssumptions(down_payment=1, vacancy_rate=float("inf"))


def test_candidate_copied_with_new_id_still_gets_estimates():
    candidate = PropertyRecord(current_value=240000, mortgage_amount=200000, monthly_rent=2000)
    candidate = candidate.with_changes(id="cand-1")
    fin = financing("40000", interest_rate="6", loan_term_months=360, vacancy_rate="5")

    prepared = prepare_candidate(candidate, fin)
    assert prepared.id == "cand-1"
    assert prepared.monthly_expenses == D("100.00")
    assert prepared.monthly_debt_service == D("1199.10")
    assert prepared.monthly_cash_flow == D("700.90")
