"""
Access Log Record

One completed HTTP transaction, as handed to the access log.

DESIGN RULES:
- Pure data container
- No dependencies on the accounting core
- Immutable after creation
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class AccessLogRecord:
    """
    Immutable record of a single transaction.

    Captures:
    - Identity (request_id, method, path)
    - Outcome (status_code, error)
    - Accounting metrics published on the chain tail
    """

    request_id: str
    method: str
    path: str
    status_code: int
    finished_at: datetime
    metrics: Dict[str, str] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def elapsed_us(self) -> Optional[int]:
        """Total elapsed microseconds, if accounting published it."""
        value = self.metrics.get("ACC_time")
        return int(value) if value is not None else None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for logging/export."""
        return {
            "request_id": self.request_id,
            "method": self.method,
            "path": self.path,
            "status_code": self.status_code,
            "finished_at": self.finished_at.isoformat(),
            "metrics": dict(self.metrics),
            "error": self.error,
        }
