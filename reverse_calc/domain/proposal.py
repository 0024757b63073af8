"""Reverse consolidation proposal - main entry point wiring the engine together"""

from datetime import date
from typing import List, Optional

from reverse_calc.domain.deal_terms import resolve_deal_terms
from reverse_calc.domain.metrics import calculate_deal_metrics
from reverse_calc.domain.models import DealSettings, Position, ProposalResult
from reverse_calc.domain.positions import DISCREPANCY_TOLERANCE, with_days
from reverse_calc.domain.savings import project_savings
from reverse_calc.domain.schedule import (
    MAX_SIMULATION_DAYS,
    build_weekly_schedule,
    day_one_summary,
    simulate_daily_schedule,
)


def calculate_proposal(
    positions: List[Position],
    settings: DealSettings,
    monthly_revenue: float,
    as_of: Optional[date] = None,
    max_days: int = MAX_SIMULATION_DAYS,
    discrepancy_tolerance: float = DISCREPANCY_TOLERANCE,
) -> ProposalResult:
    """
    Evaluate a reverse consolidation from positions and deal settings.

    Flow:
    1. Annotate positions with effective balance and days to payoff
    2. Resolve funding and the new payment terms for included positions
    3. Simulate the daily schedule and roll it up by week
    4. Derive deal metrics and the merchant savings projection

    Deterministic for a fixed `as_of`; `as_of` only matters for positions
    whose balance is derived from their funded date.

    Raises:
        InvalidConfigurationError: settings cannot produce a finite deal
        NonTerminatingScheduleError: RTR still owed after max_days
    """
    if as_of is None:
        as_of = date.today()

    annotated = with_days(positions, as_of, discrepancy_tolerance)
    included = [p for p in annotated if p.included]

    terms = resolve_deal_terms(included, settings)
    daily = simulate_daily_schedule(
        included,
        settings.new_money,
        terms.new_daily_payment,
        settings.rate,
        terms.consolidation_fees,
        max_days,
    )
    weekly = build_weekly_schedule(daily)

    return ProposalResult(
        daily_schedule=daily,
        weekly_schedule=weekly,
        positions_with_days=annotated,
        terms=terms,
        metrics=calculate_deal_metrics(daily, terms, annotated, settings, monthly_revenue),
        savings=project_savings(included, daily, weekly, terms, settings),
        day_one=day_one_summary(daily, terms.consolidation_fees, settings),
        discrepancies=[p.discrepancy for p in annotated if p.discrepancy is not None],
    )
