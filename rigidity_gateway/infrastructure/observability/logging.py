"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from rigidity_gateway.config import settings


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

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_expense_scored(
    request_id: str,
    user_id: str,
    cancelability_score: int,
    computed_rigidity: str,
    rigidity_effective: str,
    override_outcome: str,
    warning_count: int,
    duration_ms: float,
) -> None:
    """Log structured classification outcome for audit and analysis"""
    logging.info(
        "Expense scored",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "expense_scored",
            "cancelability_score": cancelability_score,
            "computed_rigidity": computed_rigidity,
            "rigidity_effective": rigidity_effective,
            "override_outcome": override_outcome,
            "warning_count": warning_count,
            "duration_ms": duration_ms,
        },
    )


def log_report_computed(
    request_id: str,
    user_id: str,
    overall_status: str,
    fixed_pct: float,
    unclassified_count: int,
    duration_ms: float,
) -> None:
    """Log structured monthly report outcome"""
    logging.info(
        "Monthly report computed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "report_complete",
            "overall_risk": overall_status,
            "fixed_pct": fixed_pct,
            "unclassified_count": unclassified_count,
            "duration_ms": duration_ms,
        },
    )
