"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from reverse_calc.config import settings


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


def log_proposal(
    request_id: str,
    position_count: int,
    total_funding: float,
    total_days: int,
    discrepancy_count: int,
    duration_ms: float,
) -> None:
    """Log structured proposal outcome for analysis"""
    logging.info(
        "Proposal calculated",
        extra={
            "request_id": request_id,
            "step": "proposal_complete",
            "position_count": position_count,
            "total_funding": round(total_funding, 2),
            "total_days": total_days,
            "discrepancy_count": discrepancy_count,
            "duration_ms": duration_ms,
        },
    )
