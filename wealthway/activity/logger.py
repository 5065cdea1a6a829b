"""
Activity Logger

DESIGN DECISION: Every state change is logged as a structured event.
This provides:
1. Debugging capability
2. A readable trace of a session in the console

The activity logger:
- Is synchronous; the store runs one user action at a time
- Never raises; a logging failure must not break a user action
- Writes local logs only. Nothing is persisted.
"""

import logging
import sys
from typing import Optional

import structlog

from wealthway.models.activity import ActivityEvent, ActivityEventBuilder, ActivitySeverity


_CONFIGURED = False


def configure_logging(level: str = "INFO") -> None:
    """
    Configure structlog and the stdlib root handler once per process.

    Later calls only adjust the level.
    """
    global _CONFIGURED

    numeric_level = getattr(logging, str(level).upper(), logging.INFO)
    if _CONFIGURED:
        logging.getLogger().setLevel(numeric_level)
        return

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=numeric_level)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _CONFIGURED = True


def get_logger(name: Optional[str] = None):
    """Get a structlog logger bound to `name`."""
    return structlog.get_logger(name or "wealthway")


class ActivityLogger:
    """
    Central activity logging service.

    Emits ActivityEvents to the structured local log. Components receive
    one of these (or None) and call the typed helpers.
    """

    def __init__(self, logger=None):
        self._logger = logger or get_logger("wealthway.activity")

    def log(self, event: ActivityEvent) -> None:
        """Log an activity event at a level matching its severity."""
        log_dict = event.to_log_dict()
        try:
            if event.severity == ActivitySeverity.ERROR:
                self._logger.error("activity_event", **log_dict)
            elif event.severity == ActivitySeverity.WARNING:
                self._logger.warning("activity_event", **log_dict)
            elif event.severity == ActivitySeverity.DEBUG:
                self._logger.debug("activity_event", **log_dict)
            else:
                self._logger.info("activity_event", **log_dict)
        except Exception as e:
            # Last resort: keep the user action alive
            print(f"WARNING: Failed to write activity event: {e}", file=sys.stderr)

    def log_transaction_created(self, transaction_id: str, transaction_type: str, amount: int) -> None:
        self.log(ActivityEventBuilder.transaction_created(transaction_id, transaction_type, amount))

    def log_transaction_updated(self, transaction_id: str, changed_fields: list[str]) -> None:
        self.log(ActivityEventBuilder.transaction_updated(transaction_id, changed_fields))

    def log_transaction_deleted(self, transaction_id: str) -> None:
        self.log(ActivityEventBuilder.transaction_deleted(transaction_id))

    def log_transaction_rejected(self, reason: str, transaction_id: Optional[str] = None) -> None:
        self.log(ActivityEventBuilder.transaction_rejected(reason, transaction_id))

    def log_cycle_start_day_changed(self, old_day: int, new_day: int) -> None:
        self.log(ActivityEventBuilder.cycle_start_day_changed(old_day, new_day))

    def log_state_loaded(self, transaction_count: int, cycle_start_day: int, schema_version: int) -> None:
        self.log(ActivityEventBuilder.state_loaded(transaction_count, cycle_start_day, schema_version))

    def log_advice_requested(self, generation: int, transaction_count: int) -> None:
        self.log(ActivityEventBuilder.advice_requested(generation, transaction_count))

    def log_advice_generated(self, generation: int) -> None:
        self.log(ActivityEventBuilder.advice_generated(generation))

    def log_advice_discarded(self, generation: int, latest: int) -> None:
        self.log(ActivityEventBuilder.advice_discarded(generation, latest))

    def log_storage_error(self, operation: str, error_message: str) -> None:
        self.log(ActivityEventBuilder.storage_error(operation, error_message))

    def log_external_service_error(self, service: str, error_message: str) -> None:
        self.log(ActivityEventBuilder.external_service_error(service, error_message))
