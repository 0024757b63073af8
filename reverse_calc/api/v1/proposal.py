"""POST /v1/proposal - Reverse consolidation proposal endpoints"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException

from reverse_calc.api.dependencies import get_request_id
from reverse_calc.api.v1.schemas import (
    BreakdownRequest,
    BreakdownResponse,
    DayOneSchema,
    DayScheduleSchema,
    DealMetricsSchema,
    DealTermsSchema,
    DiscrepancySchema,
    PositionWithDaysSchema,
    ProposalRequest,
    ProposalResponse,
    SavingsSchema,
    WeekScheduleSchema,
)
from reverse_calc.config import settings
from reverse_calc.domain.exceptions import InvalidConfigurationError, NonTerminatingScheduleError
from reverse_calc.domain.models import ProposalResult
from reverse_calc.domain.proposal import calculate_proposal
from reverse_calc.domain.schedule import cash_infusion_breakdown
from reverse_calc.infrastructure.observability.logging import log_proposal
from reverse_calc.infrastructure.observability.metrics import record_failure, record_proposal

router = APIRouter()


def evaluate(request_body: ProposalRequest, request_id: str) -> ProposalResult:
    """Run the engine, mapping domain errors to HTTP errors"""
    try:
        return calculate_proposal(
            [p.to_domain() for p in request_body.positions],
            request_body.settings.to_domain(),
            request_body.monthly_revenue,
            as_of=request_body.as_of,
            max_days=settings.max_simulation_days,
            discrepancy_tolerance=settings.balance_discrepancy_tolerance,
        )

    except InvalidConfigurationError as e:
        record_failure("invalid")
        logging.warning(f"Invalid configuration: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except NonTerminatingScheduleError as e:
        record_failure("non_terminating")
        logging.warning(f"Non-terminating schedule: {e}", extra={"request_id": request_id})
        raise HTTPException(
            status_code=422,
            detail={
                "error": "non_terminating_schedule",
                "message": str(e),
                "days_simulated": e.days_simulated,
                "rtr_balance": e.rtr_balance,
            },
        )

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


def to_response(result: ProposalResult) -> ProposalResponse:
    return ProposalResponse(
        daily_schedule=[DayScheduleSchema.model_validate(d) for d in result.daily_schedule],
        weekly_schedule=[WeekScheduleSchema.model_validate(w) for w in result.weekly_schedule],
        positions_with_days=[PositionWithDaysSchema.from_domain(p) for p in result.positions_with_days],
        terms=DealTermsSchema.model_validate(result.terms),
        metrics=DealMetricsSchema.model_validate(result.metrics),
        savings=SavingsSchema.model_validate(result.savings),
        day_one=DayOneSchema.model_validate(result.day_one) if result.day_one else None,
        discrepancies=[DiscrepancySchema.model_validate(d) for d in result.discrepancies],
    )


@router.post("/proposal", response_model=ProposalResponse)
def create_proposal(request_body: ProposalRequest, request_id: str = Depends(get_request_id)):
    """
    Evaluate a reverse consolidation proposal.

    Flow:
    1. Convert positions and settings to domain objects
    2. Resolve deal terms and simulate the daily schedule
    3. Aggregate weekly schedule, metrics and savings projection
    4. Return everything the exporters need to render the proposal
    """
    start_time = time.time()
    result = evaluate(request_body, request_id)

    duration_ms = (time.time() - start_time) * 1000
    record_proposal(len(result.daily_schedule), len(result.discrepancies))
    log_proposal(
        request_id,
        len(request_body.positions),
        result.terms.total_funding,
        len(result.daily_schedule),
        len(result.discrepancies),
        duration_ms,
    )

    return to_response(result)


@router.post("/proposal/breakdown", response_model=BreakdownResponse)
def get_breakdown(request_body: BreakdownRequest, request_id: str = Depends(get_request_id)):
    """
    Sources of the cash infusion posted on a schedule day.

    Only pay days (the first day of each week) carry an infusion; other
    days return an empty breakdown.
    """
    result = evaluate(request_body, request_id)
    included = [p for p in result.positions_with_days if p.included]

    breakdown = cash_infusion_breakdown(
        included,
        request_body.day,
        request_body.settings.new_money,
        settings.max_simulation_days,
    )
    return BreakdownResponse.model_validate(breakdown)
