"""
Delta Calculator

Differences between begin and end samples, clamped at zero.

Timers and resource counters only move forward within one process. An end
sample that precedes its begin sample means a clock adjustment, a sampling bug
or counter wraparound; that field is reported and published as 0 so a
negative number never reaches the access log.
"""

import logging

from accounting.snapshot import MICROS_PER_SECOND, TimeVal


logger = logging.getLogger(__name__)


def duration_delta(begin: TimeVal, end: TimeVal, label: str = "") -> int:
    """
    Microseconds elapsed from begin to end.

    Args:
        begin: Earlier reading.
        end: Later reading.
        label: Field name included in the anomaly report.

    Returns:
        Non-negative microseconds, 0 when end precedes begin.
    """
    if end < begin:
        logger.error(
            "Timetraveling%s: begin(%s) end(%s)",
            _describe(label), begin, end,
        )
        return 0

    logger.debug("time_difference%s:begin: %s", _describe(label), begin)
    logger.debug("time_difference%s:end: %s", _describe(label), end)

    return (end.seconds - begin.seconds) * MICROS_PER_SECOND + (end.micros - begin.micros)


def count_delta(begin: int, end: int, label: str = "") -> int:
    """
    Increase of a block counter from begin to end.

    Returns:
        end - begin, or 0 (with an error report) when the counter went down.
    """
    if begin > end:
        logger.error(
            "Negative blockcount%s: begin(%d blocks) end(%d blocks)",
            _describe(label), begin, end,
        )
        return 0

    logger.debug("block_difference%s:begin: %d", _describe(label), begin)
    logger.debug("block_difference%s:end: %d", _describe(label), end)

    return end - begin


def _describe(label: str) -> str:
    return f" [{label}]" if label else ""
