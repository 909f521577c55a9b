"""
Access Log Collector

Reads the metrics published on a transaction's chain tail and forwards an
AccessLogRecord to the configured sink.

DESIGN RULES:
- Never throw exceptions
- Read-only with respect to the request chain
- Configurable enable/disable
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from observability.record import AccessLogRecord
from observability.sink import AccessLogSink, LoggingAccessLogSink


logger = logging.getLogger(__name__)


class AccessLogCollector:
    """
    Coordinates access log emission.

    Responsibilities:
    - Build records from finished transactions
    - Forward to configured sink
    - Handle failures gracefully (never throw)
    """

    def __init__(self, sink: Optional[AccessLogSink] = None, enabled: bool = True):
        """
        Initialize collector.

        Args:
            sink: AccessLogSink to emit records to. Defaults to LoggingAccessLogSink.
            enabled: Whether access logging is enabled.
        """
        self._sink = sink or LoggingAccessLogSink()
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = value

    def capture(
        self,
        tail: Any,
        status_code: int,
        metric_keys: Optional[tuple] = None,
        error: Optional[str] = None,
    ) -> Optional[AccessLogRecord]:
        """
        Build and emit a record for a finished transaction.

        Args:
            tail: Last request of the chain (holds the published metrics)
            status_code: HTTP status sent to the client
            metric_keys: Keys to copy from the tail's notes. Defaults to all notes.
            error: Error message if the route raised

        Returns:
            The emitted record, or None if disabled or building failed.
        """
        if not self._enabled:
            return None

        try:
            record = AccessLogRecord(
                request_id=tail.request_id,
                method=tail.method,
                path=tail.uri,
                status_code=status_code,
                finished_at=datetime.now(),
                metrics=_select(tail.notes, metric_keys),
                error=error,
            )
            self._sink.emit(record)
            return record
        except Exception as e:
            logger.warning("Failed to capture access log record: %s", e)
            return None


def _select(notes: Dict[str, str], keys: Optional[tuple]) -> Dict[str, str]:
    if keys is None:
        return dict(notes)
    return {key: notes[key] for key in keys if key in notes}
