"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from evenly.config import settings


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


def log_settlements(
    request_id: str,
    settlement_count: int,
    total_transferred: float,
    duration_ms: float,
) -> None:
    """Log structured settlement run outcome"""
    logging.info(
        "Settlements calculated",
        extra={
            "request_id": request_id,
            "step": "settlements_calculated",
            "settlement_count": settlement_count,
            "total_transferred": total_transferred,
            "duration_ms": duration_ms,
        },
    )


def log_receipt_stored(
    request_id: str,
    receipt_id: str,
    item_count: int,
    assignments_complete: bool,
) -> None:
    """Log receipt commit; incomplete assignments are logged as a warning"""
    level = logging.INFO if assignments_complete else logging.WARNING
    logging.log(
        level,
        "Receipt stored" if assignments_complete else "Receipt stored with incomplete assignments",
        extra={
            "request_id": request_id,
            "step": "receipt_stored",
            "receipt_id": receipt_id,
            "item_count": item_count,
            "assignments_complete": assignments_complete,
        },
    )
