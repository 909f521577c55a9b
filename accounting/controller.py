"""
Accounting Controller

Two-phase accounting of one HTTP transaction.

start: attach a begin Snapshot to the chain root (first call wins).
stop:  take the end Snapshot, compute deltas, publish them on the chain tail.

DESIGN RULES:
- Never throw into the host - every failure is logged and skipped
- Never a final handler - both hooks always return HookResult.DECLINED
- No state across transactions beyond the weakly-keyed SnapshotStore
"""

import logging
import os
from enum import Enum
from typing import Any, Callable, Dict, Optional

from accounting.chain import ChainCycleError, RequestChainResolver
from accounting.metrics import METRIC_KEYS, compute_metrics, publish_metrics
from accounting.sampler import ResourceSampler
from accounting.store import SnapshotStore, UnsupportedRootError


logger = logging.getLogger(__name__)


class HookResult(str, Enum):
    """Value returned to the host's lifecycle hooks."""
    DECLINED = "declined"


def reap_children() -> None:
    """Collect one finished child process without blocking, if there is one."""
    try:
        os.wait4(-1, os.WNOHANG)
    except OSError:
        pass


class AccountingController:
    """
    Orchestrates sampler, resolver and delta pass at start and stop.

    One controller serves every transaction of the process; per-transaction
    state lives in the SnapshotStore (keyed by root) and in the tail's notes.
    """

    def __init__(
        self,
        sampler: Optional[ResourceSampler] = None,
        resolver: Optional[RequestChainResolver] = None,
        store: Optional[SnapshotStore] = None,
        reaper: Optional[Callable[[], None]] = reap_children,
        enabled: bool = True,
    ):
        """
        Initialize controller.

        Args:
            sampler: Source of Snapshots. Defaults to the live process.
            resolver: Chain resolver. Defaults to RequestNode attribute links.
            store: Begin snapshot side-table.
            reaper: Called before the end snapshot; None disables reaping.
            enabled: Whether accounting runs. Can be toggled at runtime.
        """
        self._sampler = sampler or ResourceSampler()
        self._resolver = resolver or RequestChainResolver()
        self._store = store if store is not None else SnapshotStore()
        self._reaper = reaper
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = value

    @property
    def store(self) -> SnapshotStore:
        return self._store

    @property
    def resolver(self) -> RequestChainResolver:
        return self._resolver

    def start(self, node: Any) -> HookResult:
        """
        Arm accounting for node's transaction.

        A chain whose root already carries a begin snapshot is left alone.
        """
        if not self._enabled:
            return HookResult.DECLINED

        try:
            root = self._resolver.resolve_root(node)
            if self._store.has(root):
                return HookResult.DECLINED
            self._store.attach_once(root, self._sampler.capture("begin"))
        except (ChainCycleError, UnsupportedRootError) as e:
            logger.error("Cannot start accounting for %s: %s", _describe(node), e)
        return HookResult.DECLINED

    def stop(self, node: Any) -> HookResult:
        """
        Finish accounting and publish metrics on the chain tail.

        Without a begin snapshot, or without a notes table on the tail,
        nothing is published.
        """
        if not self._enabled:
            return HookResult.DECLINED

        try:
            root = self._resolver.resolve_root(node)
            tail = self._resolver.resolve_tail(node)
            begin = self._store.get(root)
        except (ChainCycleError, UnsupportedRootError) as e:
            logger.error("Cannot stop accounting for %s: %s", _describe(node), e)
            return HookResult.DECLINED

        if begin is None:
            logger.error("Failed to fetch internal data! (%s)", _describe(node))
            return HookResult.DECLINED

        notes = self._resolver.notes_of(tail)
        if notes is None:
            logger.error("No notes table to publish on for %s", _describe(tail))
            return HookResult.DECLINED

        if self._reaper is not None:
            self._reaper()

        end = self._sampler.capture("end")
        publish_metrics(notes, compute_metrics(begin, end))
        return HookResult.DECLINED

    def session(self, node: Any) -> "AccountingSession":
        """Per-transaction handle bound to node."""
        return AccountingSession(self, node)


class AccountingSession:
    """
    start/stop pair for one transaction.

    Usable as a context manager: entering starts, leaving stops (also when
    the wrapped block raises; the exception still propagates).
    """

    def __init__(self, controller: AccountingController, node: Any):
        self._controller = controller
        self.node = node

    def start(self) -> HookResult:
        return self._controller.start(self.node)

    def stop(self) -> HookResult:
        return self._controller.stop(self.node)

    def metrics(self) -> Dict[str, str]:
        """Metrics published on the tail so far (empty before stop or for a broken chain)."""
        resolver = self._controller.resolver
        try:
            tail = resolver.resolve_tail(self.node)
        except ChainCycleError as e:
            logger.error("Cannot read accounting metrics for %s: %s", _describe(self.node), e)
            return {}

        notes = resolver.notes_of(tail) or {}
        return {key: notes[key] for key in METRIC_KEYS if key in notes}

    def __enter__(self) -> "AccountingSession":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


def _describe(node: Any) -> str:
    method = getattr(node, "method", None)
    uri = getattr(node, "uri", None)
    if method and uri:
        return f"{method} {uri}"
    return repr(node)
