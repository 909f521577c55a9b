"""
Request Chain Resolution

Finds the root (where the begin snapshot lives) and the tail (where results
are published) of a transaction's request chain.

DESIGN RULES:
- Read-only: chain links are owned by the host
- No knowledge of snapshots or delta computation
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, MutableMapping, Optional


class ChainCycleError(Exception):
    """Raised when following chain links does not terminate."""


class ChainNavigator(ABC):
    """
    Read-only view of the host's chain links and per-node metadata tables.

    Implementations:
    - AttributeNavigator (RequestNode.parent / .previous / .next)
    """

    @abstractmethod
    def parent_of(self, node: Any) -> Optional[Any]:
        """Request this node was generated from as a sub-request."""
        pass

    @abstractmethod
    def previous_of(self, node: Any) -> Optional[Any]:
        """Request that internally redirected to this node."""
        pass

    @abstractmethod
    def next_of(self, node: Any) -> Optional[Any]:
        """Request this node internally redirected to."""
        pass

    def notes_of(self, node: Any) -> Optional[MutableMapping[str, str]]:
        """Table the node's published metrics are written to, None if it has none."""
        notes = getattr(node, "notes", None)
        return notes if isinstance(notes, MutableMapping) else None


class AttributeNavigator(ChainNavigator):
    """Navigator for nodes exposing ``parent``, ``previous`` and ``next``."""

    def parent_of(self, node: Any) -> Optional[Any]:
        return getattr(node, "parent", None)

    def previous_of(self, node: Any) -> Optional[Any]:
        return getattr(node, "previous", None)

    def next_of(self, node: Any) -> Optional[Any]:
        return getattr(node, "next", None)


class RequestChainResolver:
    """
    Resolves chain endpoints.

    root: follow parent links to the main request, then previous links to
    the first request of its redirect sequence.
    tail: follow parent links to the main request, then next links to the
    last request of its redirect sequence.
    """

    DEFAULT_MAX_HOPS = 10_000

    def __init__(
        self,
        navigator: Optional[ChainNavigator] = None,
        max_hops: int = DEFAULT_MAX_HOPS,
    ):
        self._navigator = navigator or AttributeNavigator()
        self._max_hops = max_hops

    def resolve_main(self, node: Any) -> Any:
        """Outermost ancestor via parent links."""
        return self._follow(node, self._navigator.parent_of, "parent")

    def resolve_root(self, node: Any) -> Any:
        """First request of the main request's redirect sequence."""
        return self._follow(self.resolve_main(node), self._navigator.previous_of, "previous")

    def resolve_tail(self, node: Any) -> Any:
        """Last request of the main request's redirect sequence."""
        return self._follow(self.resolve_main(node), self._navigator.next_of, "next")

    def notes_of(self, node: Any) -> Optional[MutableMapping[str, str]]:
        """Published-metrics table of node, as exposed by the navigator."""
        return self._navigator.notes_of(node)

    def _follow(self, node: Any, step: Callable[[Any], Optional[Any]], relation: str) -> Any:
        current = node
        for _ in range(self._max_hops):
            following = step(current)
            if following is None:
                return current
            current = following
        raise ChainCycleError(
            f"'{relation}' links did not terminate after {self._max_hops} hops"
        )
