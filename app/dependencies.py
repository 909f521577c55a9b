"""
FastAPI Dependencies

All object creation happens here, not per request.
This module wires the accounting core and the access log for the host.
"""

from functools import lru_cache

from fastapi import Request

from accounting.controller import AccountingController, reap_children
from accounting.metrics import METRIC_KEYS
from app.core.config import settings
from observability.collector import AccessLogCollector
from observability.sink import JsonAccessLogSink, LoggingAccessLogSink


@lru_cache(maxsize=1)
def get_accounting_controller() -> AccountingController:
    """
    Create and cache the process-wide AccountingController.

    Returns:
        AccountingController: shared by every transaction of this worker.
    """
    return AccountingController(
        reaper=reap_children if settings.reap_children else None,
        enabled=settings.accounting_enabled,
    )


@lru_cache(maxsize=1)
def get_access_log_collector() -> AccessLogCollector:
    """Create and cache the access log collector for the configured format."""
    if settings.access_log_format == "json":
        sink = JsonAccessLogSink()
    else:
        sink = LoggingAccessLogSink(keys=METRIC_KEYS)

    return AccessLogCollector(sink=sink, enabled=settings.access_log_enabled)


def current_controller(request: Request) -> AccountingController:
    """The controller the serving app's middleware was built with."""
    return request.app.state.accounting_controller
