"""
Activity Logger

DESIGN DECISION: Every change to the user's records is logged as one
structured line. This provides:
1. A readable history of what happened to the data
2. Debugging capability when a saved file looks wrong
3. Correlation between UI actions and persistence failures

The activity logger:
- Subscribes to the record store like any other observer
- Never raises into the mutation that triggered it
- Writes JSON lines through structlog on top of stdlib logging
"""

import logging
import sys
from typing import Optional

import structlog

from rupeewise.models.events import ChangeEvent
from rupeewise.store.record_store import RecordStore


# Configure structlog for local logging
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
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route stdlib logging (and therefore structlog) to stderr.

    structlog renders the JSON; the stdlib format is just the message.
    Calling this more than once only adjusts the level.
    """
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            format="%(message)s",
            stream=sys.stderr,
        )
    root.setLevel(level.upper())


class ActivityLogger:
    """
    Logs one `record_changed` line per store change event.

    Usage:
        activity = ActivityLogger()
        activity.attach(store)
    """

    def __init__(self, logger: Optional[structlog.stdlib.BoundLogger] = None):
        self._logger = logger or structlog.get_logger("rupeewise.activity")
        self._store: Optional[RecordStore] = None
        self.event_count = 0

    def attach(self, store: RecordStore) -> None:
        if self._store is not None and self._store is not store:
            self.detach()
        self._store = store
        store.subscribe(self.log)

    def detach(self) -> None:
        if self._store is not None:
            self._store.unsubscribe(self.log)
            self._store = None

    def log(self, event: ChangeEvent) -> None:
        """Log a change event locally."""
        try:
            self._logger.info("record_changed", **event.to_log_dict())
        except Exception as e:
            # Logging must never break a mutation
            print(f"Warning: activity log failed: {e}", file=sys.stderr)
            return
        self.event_count += 1
