"""POST /v1/payoff/* - debt payoff simulation endpoints"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from payoff_engine.api.v1.schemas import (
    ComparisonRequest,
    ComparisonResponse,
    PayoffResultSchema,
    SimulationRequest,
    SimulationResponse,
)
from payoff_engine.api.dependencies import get_request_id, get_settings
from payoff_engine.api.errors import error_detail
from payoff_engine.config import Settings
from payoff_engine.domain.simulator import simulate, compare_strategies
from payoff_engine.domain.recommendations import generate_recommendation, compare_recommendation
from payoff_engine.domain.exceptions import DomainException
from payoff_engine.infrastructure.observability.metrics import record_simulation, record_validation_failure
from payoff_engine.infrastructure.observability.logging import log_simulation

router = APIRouter()


@router.post("/payoff/simulate", response_model=SimulationResponse)
def simulate_payoff(
    request_body: SimulationRequest,
    request: Request,
    config: Settings = Depends(get_settings),
):
    """
    Simulate month-by-month payoff under one strategy.

    Flow:
    1. Map accounts onto domain values
    2. Run the simulator (validation happens inside)
    3. Record metrics and logs
    4. Return the schedule plus a plain-language summary
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        accounts = [a.to_domain() for a in request_body.accounts]
        result = simulate(
            accounts,
            request_body.monthly_budget,
            request_body.strategy,
            max_months=config.max_simulation_months,
        )

        duration_ms = (time.time() - start_time) * 1000
        record_simulation(result.strategy.value, result.months_to_debt_free)
        log_simulation(
            request_id,
            result.strategy.value,
            len(accounts),
            result.months_to_debt_free,
            result.total_interest_paid,
            duration_ms,
        )

        return SimulationResponse(
            strategy=result.strategy.value,
            result=PayoffResultSchema.from_domain(result),
            recommendation=generate_recommendation(result),
        )

    except DomainException as e:
        record_validation_failure(e)
        logging.warning(f"Simulation rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=error_detail(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/payoff/compare", response_model=ComparisonResponse)
def compare_payoff(
    request_body: ComparisonRequest,
    request: Request,
    config: Settings = Depends(get_settings),
):
    """Run avalanche and snowball side by side and recommend one"""
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        accounts = [a.to_domain() for a in request_body.accounts]
        comparison = compare_strategies(
            accounts,
            request_body.monthly_budget,
            max_months=config.max_simulation_months,
        )

        duration_ms = (time.time() - start_time) * 1000
        for result in (comparison.avalanche, comparison.snowball):
            record_simulation(result.strategy.value, result.months_to_debt_free)
            log_simulation(
                request_id,
                result.strategy.value,
                len(accounts),
                result.months_to_debt_free,
                result.total_interest_paid,
                duration_ms,
            )

        return ComparisonResponse.from_domain(comparison, compare_recommendation(comparison))

    except DomainException as e:
        record_validation_failure(e)
        logging.warning(f"Comparison rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=error_detail(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
