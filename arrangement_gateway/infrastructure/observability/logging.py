"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = "arrangement-gateway"


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


def log_quote(
    request_id: str,
    frequency: str,
    monthly_base_cents: int,
    payment_cents: int,
    floor_applied: bool,
) -> None:
    """Log a computed payment quote"""
    logging.info(
        "Quote computed",
        extra={
            "request_id": request_id,
            "step": "quote",
            "frequency": frequency,
            "monthly_base_cents": monthly_base_cents,
            "payment_cents": payment_cents,
            "floor_applied": floor_applied,
        },
    )


def log_arrangement_accepted(
    request_id: str,
    tenant_id: str,
    account_id: str,
    plan_type: str,
    monthly_base_cents: int,
    duration_ms: float,
) -> None:
    """Log structured acceptance outcome for analysis"""
    logging.info(
        "Arrangement accepted",
        extra={
            "request_id": request_id,
            "tenant_id": tenant_id,
            "account_id": account_id,
            "step": "arrangement_accepted",
            "plan_type": plan_type,
            "monthly_base_cents": monthly_base_cents,
            "duration_ms": duration_ms,
        },
    )
