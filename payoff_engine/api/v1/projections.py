"""POST /v1/projections/* - trend statistics and debt-free projections"""

import time
import logging
from datetime import datetime, timezone
from fastapi import APIRouter, HTTPException, Request

from payoff_engine.api.v1.schemas import (
    ProjectionRequest,
    ProjectionResponse,
    SnapshotBuildRequest,
    SnapshotSchema,
    WeightedAprRequest,
    WeightedAprResponse,
)
from payoff_engine.api.dependencies import get_request_id
from payoff_engine.domain.trends import build_snapshot, project, weighted_apr
from payoff_engine.infrastructure.observability.metrics import record_projection
from payoff_engine.infrastructure.observability.logging import log_projection

router = APIRouter()


@router.post("/projections", response_model=ProjectionResponse)
def create_projection(request_body: ProjectionRequest, request: Request):
    """
    Derive reduction rate, projected debt-free date and milestones from a snapshot history.

    Snapshots may arrive in any order; they are sorted by timestamp.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        snapshots = [s.to_domain() for s in request_body.snapshots]
        projection = project(snapshots)
    except TypeError as e:
        # naive and timezone-aware timestamps cannot be ordered together
        logging.warning(f"Projection rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail="Snapshot timestamps must all carry a timezone or all omit one")
    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_projection(projection.months_remaining)
    log_projection(
        request_id,
        len(snapshots),
        projection.months_remaining,
        len(projection.milestones),
        duration_ms,
    )

    return ProjectionResponse.from_domain(projection)


@router.post("/projections/weighted-apr", response_model=WeightedAprResponse)
def get_weighted_apr(request_body: WeightedAprRequest):
    """Instantaneous balance-weighted APR across accounts"""
    accounts = [a.to_domain() for a in request_body.accounts]
    return WeightedAprResponse(
        weighted_apr=weighted_apr(accounts),
        total_balance=round(sum(a.balance for a in accounts if a.balance > 0), 2),
    )


@router.post("/projections/snapshot", response_model=SnapshotSchema)
def create_snapshot(request_body: SnapshotBuildRequest):
    """
    Summarize current accounts into a snapshot the caller can store.

    Returns:
        Snapshot with totals, utilization, weighted rate and change from previous
    """
    if not request_body.accounts:
        raise HTTPException(status_code=422, detail="At least one account is required")

    snapshot = build_snapshot(
        [a.to_domain() for a in request_body.accounts],
        timestamp=request_body.timestamp or datetime.now(timezone.utc),
        previous=request_body.previous.to_domain() if request_body.previous else None,
    )
    return SnapshotSchema.from_domain(snapshot)
