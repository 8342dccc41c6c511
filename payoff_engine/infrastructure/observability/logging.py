"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from payoff_engine.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_simulation(
    request_id: str,
    strategy: str,
    account_count: int,
    months_to_debt_free: Optional[int],
    total_interest_paid: float,
    duration_ms: float,
) -> None:
    """Log structured simulation outcome for analysis"""
    logging.info(
        "Payoff simulation completed",
        extra={
            "request_id": request_id,
            "step": "simulation_complete",
            "strategy": strategy,
            "account_count": account_count,
            "outcome": "converged" if months_to_debt_free is not None else "non_convergent",
            "months_to_debt_free": months_to_debt_free,
            "total_interest_paid": total_interest_paid,
            "duration_ms": duration_ms,
        },
    )


def log_projection(
    request_id: str,
    snapshot_count: int,
    months_remaining: Optional[int],
    milestone_count: int,
    duration_ms: float,
) -> None:
    """Log structured projection outcome for analysis"""
    logging.info(
        "Projection completed",
        extra={
            "request_id": request_id,
            "step": "projection_complete",
            "snapshot_count": snapshot_count,
            "outcome": "projected" if months_remaining is not None else "no_projection",
            "months_remaining": months_remaining,
            "milestone_count": milestone_count,
            "duration_ms": duration_ms,
        },
    )
