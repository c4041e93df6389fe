"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from pennywise.config import settings


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


def log_cycles_generated(
    request_id: str,
    card_id: int,
    cycle_count: int,
    today: str,
) -> None:
    """Log which cycles were served for a card"""
    logging.info(
        "Billing cycles generated",
        extra={
            "request_id": request_id,
            "card_id": card_id,
            "step": "cycles_generated",
            "cycle_count": cycle_count,
            "today": today,
        },
    )


def log_summary_computed(
    request_id: str,
    period: str,
    transaction_count: int,
    cycle_attributed: int,
    duration_ms: float,
) -> None:
    """Log a computed spending summary and how many entries used card cycles"""
    logging.info(
        "Summary computed",
        extra={
            "request_id": request_id,
            "step": "summary_complete",
            "period": period,
            "transaction_count": transaction_count,
            "cycle_attributed": cycle_attributed,
            "duration_ms": duration_ms,
        },
    )
