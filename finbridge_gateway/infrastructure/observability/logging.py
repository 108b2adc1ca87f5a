"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from finbridge_gateway.config import settings


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

    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_command(
    owner_id: str,
    intent: str,
    category: str,
    action: str,
    source: str,
    duration_ms: float,
    transaction_id: Optional[str] = None,
) -> None:
    """Log one executed command for audit and analysis"""
    logging.getLogger("finbridge_gateway.commands").info(
        "Command executed",
        extra={
            "owner_id": owner_id,
            "step": "command_complete",
            "intent": intent,
            "category": category,
            "action": action,
            "source": source,  # remote | local
            "transaction_id": transaction_id,
            "duration_ms": duration_ms,
        },
    )
