"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from finsight_gateway.config import settings


LOG_FORMAT = "%(timestamp)s %(level)s %(name)s %(message)s"

# Context fields reported in milliseconds; rounded so log lines stay comparable
DURATION_FIELDS = ("duration_ms",)


class FinsightJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter stamping each record with UTC time, level and service name.

    Context fields passed as None (e.g. best_strategy for an empty simulation)
    are dropped instead of being emitted as null.
    """

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        for key in [k for k, v in log_record.items() if v is None]:
            del log_record[key]
        for key in DURATION_FIELDS:
            if isinstance(log_record.get(key), float):
                log_record[key] = round(log_record[key], 2)

        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Route every logger through a single JSON stdout handler at the configured level"""
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(FinsightJsonFormatter(LOG_FORMAT))
    root.addHandler(handler)


def log_simulation(
    request_id: str,
    user_id: str,
    debt_count: int,
    best_strategy: Optional[str],
    months_to_payoff: Optional[int],
    duration_ms: float,
) -> None:
    """Log structured payoff simulation outcome for analysis"""
    logging.info(
        "Simulation completed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "simulation_complete",
            "debt_count": debt_count,
            "best_strategy": best_strategy,
            "months_to_payoff": months_to_payoff,
            "duration_ms": duration_ms,
        },
    )


def log_diversification(
    request_id: str,
    user_id: str,
    overall_score: int,
    source_count: int,
    fallback: bool,
) -> None:
    """Log structured diversification score outcome"""
    logging.info(
        "Diversification scored",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "diversification_complete",
            "overall_score": overall_score,
            "source_count": source_count,
            "fallback": fallback,
        },
    )
