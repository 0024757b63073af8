"""
Position model - effective balances, days to payoff and inclusion rules.

Balances can come from two places: a manually entered figure, or an estimate
derived from funding provenance (amount funded minus business days elapsed
times the daily payment). The manual figure always wins; a disagreement is
reported as a BalanceDiscrepancy for the user to resolve, never merged.

The auto-derived balance depends on the evaluation date (`as_of`, default
today). It is the only wall-clock input to the engine.
"""

import math
from datetime import date
from typing import List, Optional

from reverse_calc.domain.models import (
    BalanceDiscrepancy,
    Position,
    PositionStatus,
    PositionWithDays,
)
from reverse_calc.utils.date_utils import add_business_days, business_days_between

DISCREPANCY_TOLERANCE = 0.01


def auto_balance(position: Position, as_of: Optional[date] = None) -> Optional[float]:
    """Estimated balance from funded date and amount, or None without provenance"""
    if position.funded_date is None or position.amount_funded is None:
        return None

    if as_of is None:
        as_of = date.today()

    elapsed = business_days_between(position.funded_date, as_of)
    return max(0.0, position.amount_funded - position.daily_payment * elapsed)


def effective_balance(position: Position, as_of: Optional[date] = None) -> Optional[float]:
    """Manual balance if entered, otherwise the auto-derived estimate, otherwise None"""
    if position.balance is not None:
        return position.balance
    return auto_balance(position, as_of)


def balance_discrepancy(
    position: Position,
    as_of: Optional[date] = None,
    tolerance: float = DISCREPANCY_TOLERANCE,
) -> Optional[BalanceDiscrepancy]:
    """Report when the manual and auto-derived balances differ by more than a cent"""
    if position.balance is None:
        return None

    auto = auto_balance(position, as_of)
    if auto is None or abs(position.balance - auto) <= tolerance:
        return None

    return BalanceDiscrepancy(
        position_id=position.id,
        entity=position.entity,
        manual_balance=position.balance,
        auto_balance=auto,
    )


def days_left(position: Position, as_of: Optional[date] = None) -> int:
    """Business days until the position pays off under its current daily payment"""
    balance = effective_balance(position, as_of)
    if position.daily_payment > 0 and balance is not None and balance > 0:
        return math.ceil(balance / position.daily_payment)
    return 0


def is_included(position: Position, as_of: Optional[date] = None) -> bool:
    """External, opted into the reverse, and carrying a known positive balance"""
    if position.is_our_position or not position.include_in_reverse:
        return False
    balance = effective_balance(position, as_of)
    return balance is not None and balance > 0


def with_days(
    positions: List[Position],
    as_of: Optional[date] = None,
    tolerance: float = DISCREPANCY_TOLERANCE,
) -> List[PositionWithDays]:
    """Annotate every position (including ours, excluded and unknown ones) for display"""
    if as_of is None:
        as_of = date.today()

    annotated = []
    for position in positions:
        remaining = days_left(position, as_of)
        annotated.append(
            PositionWithDays(
                position=position,
                effective_balance=effective_balance(position, as_of),
                days_left=remaining,
                included=is_included(position, as_of),
                payoff_date=add_business_days(as_of, remaining) if remaining > 0 else None,
                discrepancy=balance_discrepancy(position, as_of, tolerance),
            )
        )
    return annotated


def position_status_at(
    position: PositionWithDays,
    day: Optional[int] = None,
    week: Optional[int] = None,
) -> PositionStatus:
    """
    Remaining balance and days left as of a schedule day or week.

    Payments made before the context point are `day - 1` days, or
    `(week - 1) * 5` days for a week. Without a context point the
    current figures are returned.
    """
    balance = position.effective_balance or 0.0
    remaining_days = position.days_left

    days_paid = 0
    if day is not None and day > 1:
        days_paid = day - 1
    elif week is not None and week > 1:
        days_paid = (week - 1) * 5

    balance_at = max(0.0, balance - position.daily_payment * days_paid)
    days_at = max(0, remaining_days - days_paid)
    percent_paid = (1 - balance_at / balance) * 100 if balance > 0 else 0.0

    return PositionStatus(
        entity=position.entity,
        daily_payment=position.daily_payment,
        remaining_balance=balance_at,
        days_left=days_at,
        weeks_left=math.ceil(days_at / 5),
        percent_paid=percent_paid,
    )
