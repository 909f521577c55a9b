"""
Published Metrics

Stable keys a downstream access log binds to, and the delta pass that fills
them from a begin/end Snapshot pair.
"""

from typing import Dict, MutableMapping

from accounting.delta import count_delta, duration_delta
from accounting.snapshot import Snapshot


KEY_TIME = "ACC_time"
KEY_UTIME = "ACC_utime"
KEY_STIME = "ACC_stime"
KEY_INBLOCK = "ACC_inblock"
KEY_OUBLOCK = "ACC_oublock"
KEY_CUTIME = "ACC_cutime"
KEY_CSTIME = "ACC_cstime"
KEY_CINBLOCK = "ACC_cinblock"
KEY_COUBLOCK = "ACC_coublock"

METRIC_KEYS = (
    KEY_TIME,
    KEY_UTIME,
    KEY_STIME,
    KEY_INBLOCK,
    KEY_OUBLOCK,
    KEY_CUTIME,
    KEY_CSTIME,
    KEY_CINBLOCK,
    KEY_COUBLOCK,
)


def compute_metrics(begin: Snapshot, end: Snapshot) -> Dict[str, int]:
    """
    Compute all nine deltas.

    Each field is validated on its own: one non-monotonic field is zeroed
    and reported, the rest are still computed.
    """
    own_begin, own_end = begin.self_usage, end.self_usage
    child_begin, child_end = begin.children_usage, end.children_usage

    return {
        KEY_TIME: duration_delta(begin.time, end.time, KEY_TIME),
        KEY_UTIME: duration_delta(own_begin.utime, own_end.utime, KEY_UTIME),
        KEY_STIME: duration_delta(own_begin.stime, own_end.stime, KEY_STIME),
        KEY_INBLOCK: count_delta(own_begin.inblock, own_end.inblock, KEY_INBLOCK),
        KEY_OUBLOCK: count_delta(own_begin.oublock, own_end.oublock, KEY_OUBLOCK),
        KEY_CUTIME: duration_delta(child_begin.utime, child_end.utime, KEY_CUTIME),
        KEY_CSTIME: duration_delta(child_begin.stime, child_end.stime, KEY_CSTIME),
        KEY_CINBLOCK: count_delta(child_begin.inblock, child_end.inblock, KEY_CINBLOCK),
        KEY_COUBLOCK: count_delta(child_begin.oublock, child_end.oublock, KEY_COUBLOCK),
    }


def publish_metrics(notes: MutableMapping[str, str], metrics: Dict[str, int]) -> None:
    """Write metrics into a node's notes as decimal strings."""
    for key, value in metrics.items():
        notes[key] = str(value)
