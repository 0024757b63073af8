"""Unit tests for the daily schedule simulator"""

import pytest
from reverse_calc.domain.deal_terms import resolve_deal_terms
from reverse_calc.domain.exceptions import NonTerminatingScheduleError
from reverse_calc.domain.models import DealSettings, Position
from reverse_calc.domain.positions import with_days
from reverse_calc.domain.schedule import (
    build_weekly_schedule,
    cash_infusion_breakdown,
    day_one_summary,
    is_pay_day,
    simulate_daily_schedule,
    week_of,
)


def simulate(included, settings):
    terms = resolve_deal_terms(included, settings)
    return simulate_daily_schedule(
        included,
        settings.new_money,
        terms.new_daily_payment,
        settings.rate,
        terms.consolidation_fees,
    )


def test_week_numbering():
    assert [week_of(d) for d in (1, 5, 6, 10, 11)] == [1, 1, 2, 2, 3]
    assert [is_pay_day(d) for d in (1, 2, 5, 6, 11)] == [True, False, False, True, True]


def test_scenario_terminates_on_rtr(scenario_included, scenario_settings):
    terms = resolve_deal_terms(scenario_included, scenario_settings)
    daily = simulate(scenario_included, scenario_settings)

    assert daily[-1].rtr_balance <= 0
    assert all(d.rtr_balance > 0 for d in daily[:-1])
    assert sum(d.daily_withdrawal for d in daily) == pytest.approx(terms.base_payback)
    # Debits start on day 2, and the final debit is partial
    assert len(daily) == 240
    assert sum(1 for d in daily if d.daily_withdrawal > 0) == terms.number_of_debits


def test_day_one_has_no_withdrawal(scenario_included, scenario_settings):
    daily = simulate(scenario_included, scenario_settings)

    assert daily[0].daily_withdrawal == 0
    assert daily[1].daily_withdrawal == pytest.approx(350)


def test_pay_day_batching():
    """$100/day for 100 days: $500 lands on each week's first day, nothing in between"""
    included = with_days([Position(id=1, entity="A", balance=10_000, daily_payment=100)])
    daily = simulate(included, DealSettings(fee_percent=0, rate=1.5, daily_payment_decrease=0.3))

    assert daily[0].cash_infusion == 500
    assert [d.cash_infusion for d in daily[1:5]] == [0, 0, 0, 0]
    assert daily[5].cash_infusion == 500
    assert daily[95].cash_infusion == 500  # day 96, last full week
    assert daily[100].cash_infusion == 0  # day 101, position paid off


def test_partial_final_week_is_prorated():
    """98 days left: week 20 (days 96-100) only collects days 96-98"""
    included = with_days([Position(id=1, entity="A", balance=9_750, daily_payment=100)])
    daily = simulate(included, DealSettings(fee_percent=0, rate=1.5, daily_payment_decrease=0.3))

    assert daily[95].cash_infusion == 300
    assert sum(d.cash_infusion for d in daily) == pytest.approx(9_800)


def test_new_money_lands_on_day_one(scenario_included, scenario_settings):
    scenario_settings.new_money = 10_000
    daily = simulate(scenario_included, scenario_settings)

    assert daily[0].cash_infusion == 12_500
    assert daily[5].cash_infusion == 2_500


def test_exposure_and_rtr_consistency(scenario_included, scenario_settings):
    terms = resolve_deal_terms(scenario_included, scenario_settings)
    daily = simulate(scenario_included, scenario_settings)

    net_funded = 0.0
    debits = 0.0
    for entry in daily:
        net_funded += entry.cash_infusion
        debits += entry.daily_withdrawal
        assert entry.exposure_on_reverse == pytest.approx(net_funded - debits)
        assert entry.rtr_balance == pytest.approx(
            (net_funded + terms.consolidation_fees) * scenario_settings.rate - debits
        )
    assert daily[-1].exposure_on_reverse < 0


def test_withdrawal_never_exceeds_rtr(scenario_included, scenario_settings):
    daily = simulate(scenario_included, scenario_settings)

    assert all(d.daily_withdrawal >= 0 for d in daily)
    assert daily[-1].daily_withdrawal < 350
    assert daily[-1].rtr_balance == pytest.approx(0, abs=1e-6)


def test_empty_deal_has_empty_schedule():
    assert simulate_daily_schedule([], 0, 0, 1.5, 0) == []


def test_non_terminating_schedule_raises(scenario_included):
    with pytest.raises(NonTerminatingScheduleError) as exc_info:
        simulate_daily_schedule(scenario_included, 0, 1.0, 1.5, 5_000)

    error = exc_info.value
    assert error.days_simulated == 500
    assert error.rtr_balance > 0
    assert len(error.schedule) == 500


def test_custom_day_cap(scenario_included):
    with pytest.raises(NonTerminatingScheduleError) as exc_info:
        simulate_daily_schedule(scenario_included, 0, 350, 1.5, 5_555.56, max_days=100)

    assert len(exc_info.value.schedule) == 100


def test_weekly_rollup(scenario_included, scenario_settings):
    daily = simulate(scenario_included, scenario_settings)
    weekly = build_weekly_schedule(daily)

    assert len(weekly) == 48
    assert weekly[0].cash_infusion == 2_500
    assert weekly[0].total_debits == pytest.approx(4 * 350)
    assert weekly[1].total_debits == pytest.approx(5 * 350)
    assert weekly[0].end_exposure == daily[4].exposure_on_reverse
    assert weekly[-1].end_exposure == daily[-1].exposure_on_reverse
    assert sum(w.total_debits for w in weekly) == pytest.approx(sum(d.daily_withdrawal for d in daily))


def test_cash_infusion_breakdown_matches_schedule():
    included = with_days(
        [
            Position(id=1, entity="Short", balance=300, daily_payment=100),
            Position(id=2, entity="Long", balance=20_000, daily_payment=200),
        ]
    )
    settings = DealSettings(fee_percent=0.05, rate=1.3, new_money=5_000)
    daily = simulate(included, settings)

    breakdown = cash_infusion_breakdown(included, 1, new_money=5_000)

    assert [e.entity for e in breakdown.entries] == ["New Money", "Short", "Long"]
    assert breakdown.entries[0].is_new_money
    assert breakdown.entries[1].days_contributing == 3
    assert breakdown.entries[1].total_contribution == 300
    assert breakdown.entries[2].days_contributing == 5
    assert breakdown.total == daily[0].cash_infusion == 6_300


def test_cash_infusion_breakdown_non_pay_day_is_empty(scenario_included):
    breakdown = cash_infusion_breakdown(scenario_included, 2)

    assert breakdown.entries == []
    assert breakdown.total == 0


def test_day_one_summary(scenario_included, scenario_settings):
    terms = resolve_deal_terms(scenario_included, scenario_settings)
    daily = simulate(scenario_included, scenario_settings)

    summary = day_one_summary(daily, terms.consolidation_fees, scenario_settings)

    assert summary.cash_infused == 2_500
    assert summary.gross_contract == pytest.approx(2_500 + terms.consolidation_fees)
    assert summary.day_one_rtr == pytest.approx(summary.gross_contract * 1.5)
    assert summary.day_one_rtr == pytest.approx(daily[0].rtr_balance)
    assert summary.fee_label == "Proportional Fee"


def test_day_one_summary_upfront_label(scenario_included, scenario_settings):
    scenario_settings.fee_schedule = "upfront"
    daily = simulate(scenario_included, scenario_settings)

    assert day_one_summary(daily, 100, scenario_settings).fee_label == "Full Fee (Upfront)"
    assert day_one_summary([], 100, scenario_settings) is None
