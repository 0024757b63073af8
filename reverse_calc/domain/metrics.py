"""Deal metrics - exposure, profit, true factor and leverage from the simulated schedule"""

from typing import List

from reverse_calc.domain.models import (
    DaySchedule,
    DealMetrics,
    DealSettings,
    DealTerms,
    PositionWithDays,
)

BUSINESS_DAYS_PER_MONTH = 22
BUSINESS_DAYS_PER_WEEK = 5


def leverage(daily_payment: float, monthly_revenue: float) -> float:
    """Daily debt service as a percentage of monthly revenue (22 business days/month)"""
    if monthly_revenue <= 0:
        return 0.0
    return (daily_payment * BUSINESS_DAYS_PER_MONTH / monthly_revenue) * 100


def deal_true_factor(profit: float, max_exposure: float, consolidation_fees: float) -> float:
    """
    Yield on peak capital at risk.

    1 + (profit - fees) / (max_exposure + fees); 0 when never exposed.
    """
    if max_exposure <= 0:
        return 0.0
    return 1 + (profit - consolidation_fees) / (max_exposure + consolidation_fees)


def calculate_deal_metrics(
    daily: List[DaySchedule],
    terms: DealTerms,
    positions: List[PositionWithDays],
    settings: DealSettings,
    monthly_revenue: float,
) -> DealMetrics:
    """
    Summarize a simulated schedule.

    `positions` is the full annotated list: current leverage counts every
    external position's daily payment, including ones excluded from the
    reverse or with unknown balance, since the merchant still services them.
    """
    total_days = len(daily)

    if daily:
        max_entry = max(daily, key=lambda d: d.exposure_on_reverse)  # first day on ties
        max_exposure = max_entry.exposure_on_reverse
        max_exposure_day = max_entry.day
    else:
        max_exposure = 0.0
        max_exposure_day = 0

    exposed_days = [d.day for d in daily if d.exposure_on_reverse > 0]
    last_day_exposed = exposed_days[-1] if exposed_days else 0
    percent_days_in_red = (last_day_exposed / total_days) * 100 if total_days else 0.0

    total_cash_infusion = sum(d.cash_infusion for d in daily)
    actual_payback_collected = sum(d.daily_withdrawal for d in daily)
    profit = actual_payback_collected - total_cash_infusion

    total_current_daily_all = sum(
        p.daily_payment for p in positions if not p.position.is_our_position
    )

    daily_savings = terms.included_daily_payment - terms.new_daily_payment
    reduction_percent = (
        (1 - terms.new_daily_payment / terms.included_daily_payment) * 100
        if terms.included_daily_payment > 0
        else 0.0
    )
    commission = terms.total_funding * settings.broker_commission

    return DealMetrics(
        total_days=total_days,
        max_exposure=max_exposure,
        max_exposure_day=max_exposure_day,
        last_day_exposed=last_day_exposed,
        percent_days_in_red=percent_days_in_red,
        total_cash_infusion=total_cash_infusion,
        actual_payback_collected=actual_payback_collected,
        profit=profit,
        deal_true_factor=deal_true_factor(profit, max_exposure, terms.consolidation_fees),
        total_current_daily_payment_all=total_current_daily_all,
        current_leverage=leverage(total_current_daily_all, monthly_revenue),
        new_leverage=leverage(terms.new_daily_payment, monthly_revenue),
        new_weekly_payment=terms.new_daily_payment * BUSINESS_DAYS_PER_WEEK,
        daily_savings=daily_savings,
        weekly_savings=daily_savings * BUSINESS_DAYS_PER_WEEK,
        monthly_savings=daily_savings * BUSINESS_DAYS_PER_MONTH,
        reduction_percent=reduction_percent,
        broker_commission_amount=commission,
        profit_after_commission=profit - commission,
    )
