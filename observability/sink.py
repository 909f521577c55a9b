"""
Access Log Sink

Abstract sink for access log output.
Storage-agnostic - implementations can write to console, file, cloud, etc.

DESIGN RULES:
- Side-effect only
- Never throw exceptions
- Storage-agnostic interface
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Iterable, Optional

from observability.record import AccessLogRecord


logger = logging.getLogger(__name__)

ACCESS_LOGGER_NAME = "request_accounting.access"


class AccessLogSink(ABC):
    """
    Abstract base for access log destinations.

    Implementations:
    - LoggingAccessLogSink (default)
    - JsonAccessLogSink
    """

    @abstractmethod
    def emit(self, record: AccessLogRecord) -> None:
        """
        Emit a record to the sink.

        Must not throw - failures should be logged and ignored.
        """
        pass


class LoggingAccessLogSink(AccessLogSink):
    """
    Default sink: one human-readable line per transaction.

    Format: ``GET /path 200 ACC_time=1234 ACC_utime=...``; metrics missing
    from the record (accounting skipped) are written as ``-``.
    """

    def __init__(self, keys: Optional[Iterable[str]] = None):
        """
        Initialize logging sink.

        Args:
            keys: Metric keys to print, in order. Defaults to the record's keys.
        """
        self._keys = list(keys) if keys is not None else None
        self._logger = logging.getLogger(ACCESS_LOGGER_NAME)

    def emit(self, record: AccessLogRecord) -> None:
        try:
            keys = self._keys if self._keys is not None else sorted(record.metrics)
            fields = " ".join(f"{key}={record.metrics.get(key, '-')}" for key in keys)
            line = f"{record.method} {record.path} {record.status_code} {fields}".rstrip()
            if record.error:
                line += f" error={record.error}"
            self._logger.info(line)
        except Exception as e:
            logger.warning("Failed to emit access log record: %s", e)


class JsonAccessLogSink(AccessLogSink):
    """
    Sink that outputs records as JSON lines.

    Useful for log aggregation systems.
    """

    def __init__(self):
        self._logger = logging.getLogger(ACCESS_LOGGER_NAME)

    def emit(self, record: AccessLogRecord) -> None:
        try:
            self._logger.info(json.dumps(record.to_dict(), default=str))
        except Exception as e:
            logger.warning("Failed to emit JSON access log record: %s", e)
