# Observability Package
from observability.record import AccessLogRecord
from observability.sink import AccessLogSink, LoggingAccessLogSink, JsonAccessLogSink
from observability.collector import AccessLogCollector

__all__ = [
    "AccessLogRecord",
    "AccessLogSink",
    "LoggingAccessLogSink",
    "JsonAccessLogSink",
    "AccessLogCollector",
]
