"""
Merchant-facing savings projection.

While the old positions are still being collected, the merchant pays only the
(lower) new daily payment and keeps the difference. Once old positions start
falling off, the old collections shrink below the new payment and the weekly
net cash flow turns negative: that week is the crossover, and the cash built
up in the week before it is the peak accumulated cash.

Weekly payments come from the simulated schedule's actual debits, not from
new_daily_payment * 5 (day 1 has no debit and the final week is partial).
"""

from typing import List

from reverse_calc.domain.metrics import BUSINESS_DAYS_PER_MONTH
from reverse_calc.domain.models import (
    CrossoverPoint,
    DaySchedule,
    DealSettings,
    DealTerms,
    EarlyPayoffOption,
    FalloffSummary,
    PayoffTimelineEntry,
    PositionWithDays,
    SavingsMilestones,
    SavingsProjection,
    WeeklyCashFlow,
    WeekSchedule,
)
from reverse_calc.domain.schedule import DAYS_PER_WEEK, collections_on, weekly_collections

MONTH_1_DAY = BUSINESS_DAYS_PER_MONTH
MONTH_3_DAY = BUSINESS_DAYS_PER_MONTH * 3


def payoff_timeline(included: List[PositionWithDays]) -> List[PayoffTimelineEntry]:
    """Included positions ordered by how soon they pay off"""
    entries = [
        PayoffTimelineEntry(
            entity=p.entity or "Unknown Funder",
            balance=p.effective_balance or 0.0,
            daily_payment=p.daily_payment,
            days_until_payoff=p.days_left,
            payoff_date=p.payoff_date,
        )
        for p in included
    ]
    return sorted(entries, key=lambda e: e.days_until_payoff)


def weekly_cash_flow(
    included: List[PositionWithDays],
    weekly: List[WeekSchedule],
) -> List[WeeklyCashFlow]:
    flows = []
    cumulative_savings = 0.0

    for week in weekly:
        first_day = (week.week - 1) * DAYS_PER_WEEK + 1
        last_day = first_day + DAYS_PER_WEEK - 1

        credits = weekly_collections(included, first_day)
        net = credits - week.total_debits
        cumulative_savings += net

        flows.append(
            WeeklyCashFlow(
                week=week.week,
                weekly_credits=credits,
                your_payment=week.total_debits,
                net_cash_flow=net,
                cumulative_savings=cumulative_savings,
                active_positions=sum(1 for p in included if p.days_left >= first_day),
                falloff_entities=[
                    p.entity for p in included if first_day <= p.days_left <= last_day
                ],
            )
        )
    return flows


def savings_milestones(daily_savings: float, max_payoff_day: int) -> SavingsMilestones:
    """Savings only accrue while old positions are still being serviced"""
    return SavingsMilestones(
        month_1=daily_savings * min(MONTH_1_DAY, max_payoff_day),
        month_3=daily_savings * min(MONTH_3_DAY, max_payoff_day),
        to_payoff=daily_savings * max_payoff_day,
    )


def find_crossover(
    included: List[PositionWithDays],
    flows: List[WeeklyCashFlow],
) -> CrossoverPoint:
    crossover_index = next(
        (i for i, flow in enumerate(flows) if flow.net_cash_flow < 0), None
    )

    if crossover_index is None:
        crossover_week = None
        peak = flows[-1] if flows else None
    else:
        crossover_week = flows[crossover_index].week
        peak = flows[crossover_index - 1] if crossover_index > 0 else None

    peak_week = peak.week if peak else 0
    cutoff_day = peak_week * DAYS_PER_WEEK
    cleared = [
        p for p in included if p.daily_payment > 0 and 0 < p.days_left <= cutoff_day
    ]

    return CrossoverPoint(
        crossover_week=crossover_week,
        peak_week=peak_week,
        peak_accumulated_cash=peak.cumulative_savings if peak else 0.0,
        positions_cleared=len(cleared),
        debt_cleared=sum(p.effective_balance or 0.0 for p in cleared),
    )


def rtr_balance_on(daily: List[DaySchedule], day: int) -> float:
    """RTR balance at the end of a schedule day; nothing is owed past payoff"""
    if 1 <= day <= len(daily):
        return max(0.0, daily[day - 1].rtr_balance)
    return 0.0


def falloff_summary(
    included: List[PositionWithDays],
    daily: List[DaySchedule],
    falloff_day: int,
) -> FalloffSummary:
    """Cash built up and balance still owed once every position has cleared"""
    cash_accumulated = 0.0
    for day in range(1, falloff_day + 1):
        withdrawal = daily[day - 1].daily_withdrawal if day <= len(daily) else 0.0
        cash_accumulated += collections_on(included, day) - withdrawal

    return FalloffSummary(
        falloff_day=falloff_day,
        cash_accumulated=cash_accumulated,
        balance_with_us=rtr_balance_on(daily, falloff_day),
        days_remaining_after_falloff=max(0, len(daily) - falloff_day),
    )


def early_payoff_options(
    daily: List[DaySchedule],
    falloff_day: int,
    settings: DealSettings,
) -> List[EarlyPayoffOption]:
    options = []
    for tier in settings.early_pay_options:
        deadline = falloff_day + tier.days_after_falloff
        balance = rtr_balance_on(daily, deadline)
        options.append(
            EarlyPayoffOption(
                days_after_falloff=tier.days_after_falloff,
                discount_percent=tier.discount_percent,
                payoff_deadline=deadline,
                balance_at_deadline=balance,
                payoff_amount=balance * (1 - tier.discount_percent),
                savings=balance * tier.discount_percent,
                available=deadline < len(daily),
            )
        )
    return options


def project_savings(
    included: List[PositionWithDays],
    daily: List[DaySchedule],
    weekly: List[WeekSchedule],
    terms: DealTerms,
    settings: DealSettings,
) -> SavingsProjection:
    """Build the full cash-buildup projection for the merchant proposal"""
    max_payoff_day = max((p.days_left for p in included), default=0)
    daily_savings = terms.included_daily_payment - terms.new_daily_payment
    flows = weekly_cash_flow(included, weekly)

    return SavingsProjection(
        timeline=payoff_timeline(included),
        weekly=flows,
        milestones=savings_milestones(daily_savings, max_payoff_day),
        crossover=find_crossover(included, flows),
        falloff=falloff_summary(included, daily, max_payoff_day),
        early_payoff_options=early_payoff_options(daily, max_payoff_day, settings),
    )
