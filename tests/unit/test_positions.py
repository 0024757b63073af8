"""Unit tests for position balances, payoff days and inclusion"""

import pytest
from datetime import date
from reverse_calc.domain.models import Position
from reverse_calc.domain.positions import (
    auto_balance,
    balance_discrepancy,
    days_left,
    effective_balance,
    is_included,
    position_status_at,
    with_days,
)

AS_OF = date(2024, 1, 8)


def funded_position(balance=None) -> Position:
    """$10k funded Monday Jan 1 at $100/day: 4 business days elapsed by Jan 8"""
    return Position(
        id=1,
        entity="Funder A",
        balance=balance,
        daily_payment=100,
        funded_date=date(2024, 1, 1),
        amount_funded=10_000,
    )


def test_auto_balance_from_funded_date():
    assert auto_balance(funded_position(), AS_OF) == 9_600


def test_auto_balance_floors_at_zero():
    position = funded_position()
    position.amount_funded = 300
    assert auto_balance(position, AS_OF) == 0


def test_auto_balance_requires_provenance():
    assert auto_balance(Position(id=1, entity="A", balance=None, daily_payment=100), AS_OF) is None


def test_manual_balance_wins_over_auto():
    assert effective_balance(funded_position(balance=9_000), AS_OF) == 9_000


def test_auto_balance_used_when_no_manual_balance():
    assert effective_balance(funded_position(), AS_OF) == 9_600


def test_unknown_balance_is_none_not_zero():
    position = Position(id=1, entity="A", balance=None, daily_payment=100)
    assert effective_balance(position, AS_OF) is None
    assert days_left(position, AS_OF) == 0
    assert not is_included(position, AS_OF)


def test_discrepancy_reported_not_merged():
    discrepancy = balance_discrepancy(funded_position(balance=9_000), AS_OF)

    assert discrepancy is not None
    assert discrepancy.manual_balance == 9_000
    assert discrepancy.auto_balance == 9_600
    assert discrepancy.difference == -600


def test_discrepancy_within_a_cent_is_ignored():
    assert balance_discrepancy(funded_position(balance=9_600.005), AS_OF) is None


def test_no_discrepancy_without_manual_balance():
    assert balance_discrepancy(funded_position(), AS_OF) is None


def test_days_left_rounds_up():
    position = Position(id=1, entity="A", balance=9_750, daily_payment=100)
    assert days_left(position) == 98


def test_days_left_zero_payment():
    position = Position(id=1, entity="A", balance=9_750, daily_payment=0)
    assert days_left(position) == 0


def test_inclusion_rules():
    assert is_included(Position(id=1, entity="A", balance=1_000, daily_payment=10))
    assert not is_included(Position(id=2, entity="Us", balance=1_000, daily_payment=10, is_our_position=True))
    assert not is_included(Position(id=3, entity="B", balance=1_000, daily_payment=10, include_in_reverse=False))
    assert not is_included(Position(id=4, entity="C", balance=0, daily_payment=10))


def test_with_days_keeps_every_position():
    positions = [
        Position(id=1, entity="A", balance=1_000, daily_payment=100),
        Position(id=2, entity="Unknown", balance=None, daily_payment=50),
        Position(id=3, entity="Us", balance=2_000, daily_payment=100, is_our_position=True),
    ]

    annotated = with_days(positions, date(2024, 1, 1))

    assert [p.id for p in annotated] == [1, 2, 3]
    assert annotated[0].included
    assert annotated[0].days_left == 10
    assert annotated[0].payoff_date == date(2024, 1, 15)
    assert annotated[1].effective_balance is None
    assert not annotated[1].balance_known
    assert annotated[1].payoff_date is None
    assert not annotated[2].included


def test_position_status_at_day_and_week():
    annotated = with_days([Position(id=1, entity="A", balance=10_000, daily_payment=100)])[0]

    by_day = position_status_at(annotated, day=11)
    by_week = position_status_at(annotated, week=3)

    for status in (by_day, by_week):
        assert status.remaining_balance == 9_000
        assert status.days_left == 90
        assert status.weeks_left == 18
        assert status.percent_paid == pytest.approx(10.0)


def test_position_status_without_context():
    annotated = with_days([Position(id=1, entity="A", balance=10_000, daily_payment=100)])[0]
    status = position_status_at(annotated)

    assert status.remaining_balance == 10_000
    assert status.days_left == 100
    assert status.percent_paid == 0
