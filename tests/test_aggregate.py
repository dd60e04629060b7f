from decimal import Decimal

import pytest
from hypothesis import given, strategies as st

from propath.domain.errors import InvalidArgumentError
from propath.domain.portfolio import aggregate
from propath.domain.property import PropertyRecord

from fixtures.portfolios import candidate_250k, rental_300k

money = st.decimals(min_value=0, max_value=10_000_000, places=2)

properties = st.lists(
    st.builds(
        PropertyRecord,
        current_value=money,
        mortgage_amount=money,
        monthly_rent=st.decimals(min_value=0, max_value=50_000, places=2),
        monthly_expenses=st.decimals(min_value=0, max_value=50_000, places=2),
    ),
    max_size=12,
)


def test_empty_portfolio_is_all_zero():
    snap = aggregate([])
    assert snap.total_value == 0
    assert snap.total_debt == 0
    assert snap.total_equity == 0
    assert snap.monthly_cash_flow == 0
    assert snap.annual_return == 0
    assert snap.property_count == 0


def test_totals_for_two_properties():
    snap = aggregate([rental_300k(), candidate_250k()], owner_id=7, portfolio_id=3)

    assert snap.owner_id == 7
    assert snap.portfolio_id == 3
    assert snap.property_count == 2
    assert snap.total_value == Decimal("550000")
    assert snap.total_debt == Decimal("200000")
    assert snap.total_equity == Decimal("350000")
    assert snap.monthly_cash_flow == Decimal("2900")
    # 2900 * 12 / 550000 = 0.06327.. -> 0.0633
    assert snap.annual_return == Decimal("6.33")


def test_zero_value_portfolio_has_zero_return():
    p = PropertyRecord(current_value=0, monthly_rent=1000)
    snap = aggregate([p])
    assert snap.monthly_cash_flow == Decimal("1000")
    assert snap.annual_return == 0


def test_missing_record_is_rejected():
    with pytest.raises(InvalidArgumentError):
        aggregate([rental_300k(), None])


def test_accepts_any_iterable():
    snap = aggregate(p for p in [rental_300k()])
    assert snap.property_count == 1
    assert snap.total_equity == Decimal("100000")


@given(props=properties)
def test_equity_is_value_minus_debt(props):
    snap = aggregate(props)
    assert snap.total_equity == snap.total_value - snap.total_debt


@given(props=properties)
def test_aggregate_is_idempotent_and_pure(props):
    before = list(props)
    first = aggregate(props)
    second = aggregate(props)

    assert first == second
    assert props == before


@given(props=properties)
def test_order_does_not_matter(props):
    assert aggregate(props).model_dump(exclude={"properties"}) == aggregate(
        list(reversed(props))
    ).model_dump(exclude={"properties"})
