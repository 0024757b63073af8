"""Deal parameter resolution - funding amounts and the authoritative new payment terms"""

import math
from typing import List

from reverse_calc.domain.exceptions import InvalidConfigurationError
from reverse_calc.domain.models import DealSettings, DealTerms, PositionWithDays


def validate_settings(settings: DealSettings) -> None:
    """Reject settings that would divide by zero or produce a meaningless payback"""
    if not 0 <= settings.fee_percent < 1:
        raise InvalidConfigurationError(
            f"fee_percent must be in [0, 1), got {settings.fee_percent}"
        )
    if settings.rate <= 0:
        raise InvalidConfigurationError(f"rate must be positive, got {settings.rate}")
    if settings.new_money < 0:
        raise InvalidConfigurationError(
            f"new_money must be non-negative, got {settings.new_money}"
        )


def resolve_payment_terms(
    base_payback: float,
    included_daily_payment: float,
    settings: DealSettings,
) -> tuple[float, int]:
    """
    Derive (new_daily_payment, number_of_debits) from the settings.

    Priority, first match wins:
    1. daily_payment_override > 0: payment fixed, debits = ceil(payback / payment)
    2. term_days > 0: debits fixed, payment = payback / debits
    3. otherwise: payment = included daily payments discounted by
       daily_payment_decrease, debits = ceil(payback / payment)
    """
    if settings.daily_payment_override is not None and settings.daily_payment_override > 0:
        new_daily_payment = settings.daily_payment_override
        return new_daily_payment, math.ceil(base_payback / new_daily_payment)

    if settings.term_days is not None and settings.term_days > 0:
        number_of_debits = settings.term_days
        return base_payback / number_of_debits, number_of_debits

    new_daily_payment = included_daily_payment * (1 - settings.daily_payment_decrease)
    if new_daily_payment <= 0:
        raise InvalidConfigurationError(
            "New daily payment must be positive; check daily_payment_decrease "
            "and the included positions' daily payments"
        )
    return new_daily_payment, math.ceil(base_payback / new_daily_payment)


def resolve_deal_terms(included: List[PositionWithDays], settings: DealSettings) -> DealTerms:
    """
    Resolve funding and payment terms for the positions being bought out.

    `included` must already be filtered to external, opted-in positions with a
    known positive balance. New money is financed: it is part of the advance
    amount and therefore of the fee and payback.

    total_payback is computed here once as new_daily_payment * number_of_debits
    and must not be recomputed downstream.
    """
    validate_settings(settings)

    included_balance = sum(p.effective_balance or 0.0 for p in included)
    included_daily_payment = sum(p.daily_payment for p in included)
    total_advance_amount = included_balance + settings.new_money

    # Nothing to consolidate yet: a valid, empty deal
    if total_advance_amount == 0:
        return DealTerms(
            included_balance=0.0,
            total_advance_amount=0.0,
            total_funding=0.0,
            net_advance=0.0,
            consolidation_fees=0.0,
            base_payback=0.0,
            included_daily_payment=included_daily_payment,
            new_daily_payment=0.0,
            number_of_debits=0,
            total_payback=0.0,
        )

    total_funding = total_advance_amount / (1 - settings.fee_percent)
    net_advance = total_funding * (1 - settings.fee_percent)
    consolidation_fees = total_funding * settings.fee_percent
    base_payback = total_funding * settings.rate

    new_daily_payment, number_of_debits = resolve_payment_terms(
        base_payback, included_daily_payment, settings
    )

    return DealTerms(
        included_balance=included_balance,
        total_advance_amount=total_advance_amount,
        total_funding=total_funding,
        net_advance=net_advance,
        consolidation_fees=consolidation_fees,
        base_payback=base_payback,
        included_daily_payment=included_daily_payment,
        new_daily_payment=new_daily_payment,
        number_of_debits=number_of_debits,
        total_payback=new_daily_payment * number_of_debits,
    )
