"""
Resource Sampler

Wraps the time-of-day and getrusage queries into a single Snapshot.

DESIGN RULES:
- Read-only (no side effects beyond the OS queries)
- Never throw - a failed query is logged and reads as zero
"""

import logging
import resource
import time
from typing import Any, Callable

from accounting.snapshot import Snapshot, TimeVal, Usage


logger = logging.getLogger(__name__)

Clock = Callable[[], int]
UsageQuery = Callable[[int], Any]


class ResourceSampler:
    """
    Captures Snapshots of the running process.

    The clock returns integer nanoseconds since the epoch; the usage query
    takes a ``resource.RUSAGE_*`` constant and returns an object exposing
    ``ru_utime``, ``ru_stime``, ``ru_inblock`` and ``ru_oublock``. Both are
    injectable so tests can feed fixed readings.
    """

    def __init__(
        self,
        clock: Clock = time.time_ns,
        usage_query: UsageQuery = resource.getrusage,
    ):
        self._clock = clock
        self._usage_query = usage_query

    def capture(self, phase: str = "begin") -> Snapshot:
        """
        Take a Snapshot now.

        Args:
            phase: "begin" or "end", used only in log messages.

        Returns:
            Snapshot with zero values substituted for any failed query.
        """
        snapshot = Snapshot(
            time=self._read_time(phase),
            self_usage=self._read_usage(
                resource.RUSAGE_SELF,
                f"Request for ({phase}) resource usage failed",
            ),
            children_usage=self._read_usage(
                resource.RUSAGE_CHILDREN,
                f"Request for children's ({phase}) resource usage failed",
            ),
        )
        _log_snapshot(phase, snapshot)
        return snapshot

    def _read_time(self, phase: str) -> TimeVal:
        try:
            return TimeVal.from_nanoseconds(self._clock())
        except (OSError, ValueError) as e:
            logger.error("Request for (%s) time of day failed: %s", phase, e)
            return TimeVal()

    def _read_usage(self, who: int, failure_message: str) -> Usage:
        try:
            usage = self._usage_query(who)
        except (OSError, ValueError) as e:
            logger.error("%s: %s", failure_message, e)
            return Usage()

        return Usage(
            utime=TimeVal.from_seconds(usage.ru_utime),
            stime=TimeVal.from_seconds(usage.ru_stime),
            inblock=int(usage.ru_inblock),
            oublock=int(usage.ru_oublock),
        )


def _log_snapshot(phase: str, snapshot: Snapshot) -> None:
    """Dump every captured field at DEBUG."""
    if not logger.isEnabledFor(logging.DEBUG):
        return

    logger.debug("accounting_%s:time: %s", phase, snapshot.time)
    for scope, usage in (
        ("own_usage", snapshot.self_usage),
        ("child_usage", snapshot.children_usage),
    ):
        logger.debug("accounting_%s:%s.ru_utime: %s", phase, scope, usage.utime)
        logger.debug("accounting_%s:%s.ru_stime: %s", phase, scope, usage.stime)
        logger.debug("accounting_%s:%s.ru_inblock: %d", phase, scope, usage.inblock)
        logger.debug("accounting_%s:%s.ru_oublock: %d", phase, scope, usage.oublock)
