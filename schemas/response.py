from typing import List
from pydantic import BaseModel, Field


class ChainHop(BaseModel):
    """One request of the chain as seen by the client."""
    uri: str = Field(..., description="URI of the chained request")
    kind: str = Field(..., description="main, redirect or subrequest")


class WorkResponse(BaseModel):
    """
    API response model for the /work endpoint.

    Accounting metrics are only published after the route returns, so they
    are not part of this body; see the access log or X-Accounting-* headers.
    """
    request_id: str = Field(..., description="Identifier of the main request")
    chain: List[ChainHop] = Field(default_factory=list, description="Requests created while serving")
    spun_ms: int = Field(default=0, ge=0, description="Milliseconds of CPU work performed")
    child_exit_code: int = Field(default=-1, description="Exit code of the spawned child, -1 if none")


class HealthResponse(BaseModel):
    status: str = "ok"
    service: str
    accounting_enabled: bool
    pending_transactions: int = Field(default=0, description="Chains holding a begin snapshot")
