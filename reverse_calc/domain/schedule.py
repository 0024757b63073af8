"""
Daily schedule simulator - the day-by-day cash flow of a reverse consolidation.

Each 5-day block is a week. On the first day of each week (the pay day) the
old funders' collections for the whole week land as one lump of cash
infusion; day 1 also carries any new money. The new daily payment is debited
from day 2 onward, capped at whatever return-to-repay (RTR) is still owed.
The simulation ends on the first day the RTR balance reaches zero.

Requirements:
- Day 1 never has a withdrawal
- The origination fee is part of the gross contract from day 1, never re-added
- Hitting the day cap with RTR still owed is an error, not a payoff
"""

from collections import OrderedDict
from typing import List, Optional

from reverse_calc.domain.exceptions import NonTerminatingScheduleError
from reverse_calc.domain.models import (
    BreakdownEntry,
    CashInfusionBreakdown,
    DayOneSummary,
    DaySchedule,
    DealSettings,
    PositionWithDays,
    WeekSchedule,
)

MAX_SIMULATION_DAYS = 500
DAYS_PER_WEEK = 5


def week_of(day: int) -> int:
    return (day - 1) // DAYS_PER_WEEK + 1


def is_pay_day(day: int) -> bool:
    """First day of each 5-day block"""
    return (day - 1) % DAYS_PER_WEEK == 0


def collections_on(positions: List[PositionWithDays], day: int) -> float:
    """Sum of old funders' daily payments still being collected on a given day"""
    return sum(p.daily_payment for p in positions if day <= p.days_left)


def weekly_collections(
    positions: List[PositionWithDays],
    pay_day: int,
    max_days: int = MAX_SIMULATION_DAYS,
) -> float:
    """A full week of old collections, posted as one lump on the week's pay day"""
    last_day = min(pay_day + DAYS_PER_WEEK - 1, max_days)
    return sum(collections_on(positions, d) for d in range(pay_day, last_day + 1))


def simulate_daily_schedule(
    included: List[PositionWithDays],
    new_money: float,
    new_daily_payment: float,
    rate: float,
    origination_fee: float,
    max_days: int = MAX_SIMULATION_DAYS,
) -> List[DaySchedule]:
    """
    Walk the deal forward one business day at a time until it is paid off.

    Args:
        included: Positions being bought out (already filtered)
        new_money: Extra cash disbursed to the merchant on day 1
        new_daily_payment: Resolved daily debit of the new deal
        rate: Factor rate applied to the gross contract
        origination_fee: Consolidation fee added to the gross contract
        max_days: Safety cap on simulated business days

    Returns:
        Daily schedule whose last entry has rtr_balance <= 0

    Raises:
        NonTerminatingScheduleError: RTR still owed after max_days
    """
    if not included and new_money == 0:
        return []

    schedule: List[DaySchedule] = []
    cumulative_net_funded = 0.0
    cumulative_debits = 0.0

    for day in range(1, max_days + 1):
        cash_infusion = 0.0
        if is_pay_day(day):
            if day == 1:
                cash_infusion = new_money
            cash_infusion += weekly_collections(included, day, max_days)

        cumulative_net_funded += cash_infusion
        cumulative_gross = cumulative_net_funded + origination_fee
        rtr_before_debit = cumulative_gross * rate - cumulative_debits

        daily_withdrawal = 0.0
        if day >= 2:
            daily_withdrawal = min(new_daily_payment, max(0.0, rtr_before_debit))
        cumulative_debits += daily_withdrawal

        rtr_balance = cumulative_gross * rate - cumulative_debits
        schedule.append(
            DaySchedule(
                day=day,
                week=week_of(day),
                cash_infusion=cash_infusion,
                daily_withdrawal=daily_withdrawal,
                exposure_on_reverse=cumulative_net_funded - cumulative_debits,
                rtr_balance=rtr_balance,
            )
        )

        if rtr_balance <= 0:
            return schedule

    raise NonTerminatingScheduleError(max_days, schedule[-1].rtr_balance, schedule)


def build_weekly_schedule(daily: List[DaySchedule]) -> List[WeekSchedule]:
    """Sum infusions and debits per week; end exposure is the week's last day"""
    weeks: "OrderedDict[int, List[DaySchedule]]" = OrderedDict()
    for entry in daily:
        weeks.setdefault(entry.week, []).append(entry)

    return [
        WeekSchedule(
            week=week,
            cash_infusion=sum(d.cash_infusion for d in days),
            total_debits=sum(d.daily_withdrawal for d in days),
            end_exposure=days[-1].exposure_on_reverse,
        )
        for week, days in weeks.items()
    ]


def cash_infusion_breakdown(
    included: List[PositionWithDays],
    day: int,
    new_money: float = 0.0,
    max_days: int = MAX_SIMULATION_DAYS,
) -> CashInfusionBreakdown:
    """Which funders (and new money) make up a pay day's cash infusion"""
    entries: List[BreakdownEntry] = []

    if is_pay_day(day):
        if day == 1 and new_money > 0:
            entries.append(
                BreakdownEntry(
                    entity="New Money",
                    daily_payment=0.0,
                    days_contributing=0,
                    total_contribution=new_money,
                    remaining_balance=0.0,
                    total_days_left=0,
                    is_new_money=True,
                )
            )

        last_day = min(day + DAYS_PER_WEEK - 1, max_days)
        for position in included:
            days_contributing = max(0, min(last_day, position.days_left) - day + 1)
            if days_contributing == 0 or position.daily_payment <= 0:
                continue
            entries.append(
                BreakdownEntry(
                    entity=position.entity or "Unnamed Funder",
                    daily_payment=position.daily_payment,
                    days_contributing=days_contributing,
                    total_contribution=position.daily_payment * days_contributing,
                    remaining_balance=position.effective_balance or 0.0,
                    total_days_left=position.days_left,
                )
            )

    return CashInfusionBreakdown(
        day=day,
        entries=entries,
        total=sum(e.total_contribution for e in entries),
    )


def day_one_summary(
    daily: List[DaySchedule],
    origination_fee: float,
    settings: DealSettings,
) -> Optional[DayOneSummary]:
    """Day 1 contract formation; the fee schedule only changes the label"""
    if not daily:
        return None

    cash_infused = daily[0].cash_infusion
    gross_contract = cash_infused + origination_fee
    fee_label = "Full Fee (Upfront)" if settings.fee_schedule == "upfront" else "Proportional Fee"

    return DayOneSummary(
        cash_infused=cash_infused,
        origination_fee=origination_fee,
        fee_percent=settings.fee_percent,
        gross_contract=gross_contract,
        factor_rate=settings.rate,
        day_one_rtr=gross_contract * settings.rate,
        fee_label=fee_label,
    )
