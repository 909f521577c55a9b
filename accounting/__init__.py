# Accounting Package
from accounting.snapshot import TimeVal, Usage, Snapshot
from accounting.sampler import ResourceSampler
from accounting.delta import duration_delta, count_delta
from accounting.chain import ChainNavigator, AttributeNavigator, RequestChainResolver, ChainCycleError
from accounting.store import SnapshotStore, UnsupportedRootError
from accounting.metrics import METRIC_KEYS, compute_metrics, publish_metrics
from accounting.controller import AccountingController, AccountingSession, HookResult

__all__ = [
    "TimeVal",
    "Usage",
    "Snapshot",
    "ResourceSampler",
    "duration_delta",
    "count_delta",
    "ChainNavigator",
    "AttributeNavigator",
    "RequestChainResolver",
    "ChainCycleError",
    "SnapshotStore",
    "UnsupportedRootError",
    "METRIC_KEYS",
    "compute_metrics",
    "publish_metrics",
    "AccountingController",
    "AccountingSession",
    "HookResult",
]
