import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(eq=False)
class RequestNode:
    """
    One request in a transaction's processing chain.

    parent links a sub-request to the request that generated it;
    previous / next link the requests of an internal-redirect sequence.
    Nodes compare and hash by identity so they can key weak side-tables.
    """
    method: str = "GET"
    uri: str = "/"
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    parent: Optional["RequestNode"] = None
    previous: Optional["RequestNode"] = None
    next: Optional["RequestNode"] = None
    notes: Dict[str, str] = field(default_factory=dict)

    @property
    def published_metrics(self) -> Dict[str, str]:
        """Alias for notes, the table downstream loggers read."""
        return self.notes

    def __repr__(self) -> str:
        return f"RequestNode({self.method} {self.uri}, id={self.request_id[:8]})"
