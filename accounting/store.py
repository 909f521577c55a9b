"""
Snapshot Store

Per-transaction side-table holding the begin Snapshot of each chain root.

DESIGN RULES:
- Keyed by root identity, never by string key
- No long-term persistence: entries live as long as the root node
- Thread-safe for concurrent transactions
"""

import weakref
from threading import Lock
from typing import Any, Optional

from accounting.snapshot import Snapshot


class UnsupportedRootError(TypeError):
    """Raised for roots that cannot be weakly referenced (str, int, tuple...)."""


class SnapshotStore:
    """
    Weakly-keyed map from chain root to its begin Snapshot.

    When the host discards a transaction its root becomes unreachable and the
    entry disappears with it. Roots must therefore support weak references.
    """

    def __init__(self):
        self._snapshots: "weakref.WeakKeyDictionary[Any, Snapshot]" = weakref.WeakKeyDictionary()
        self._lock = Lock()

    def get(self, root: Any) -> Optional[Snapshot]:
        """Begin snapshot attached to root, if any."""
        _check_root(root)
        with self._lock:
            return self._snapshots.get(root)

    def attach_once(self, root: Any, snapshot: Snapshot) -> bool:
        """
        Attach snapshot to root unless one is already attached.

        Returns:
            True if stored, False if root already had a snapshot.
        """
        _check_root(root)
        with self._lock:
            if root in self._snapshots:
                return False
            self._snapshots[root] = snapshot
            return True

    def has(self, root: Any) -> bool:
        _check_root(root)
        with self._lock:
            return root in self._snapshots

    def __len__(self) -> int:
        with self._lock:
            return len(self._snapshots)


def _check_root(root: Any) -> None:
    try:
        weakref.ref(root)
    except TypeError as e:
        raise UnsupportedRootError(
            f"{type(root).__name__} root cannot key the snapshot store: {e}"
        ) from e
