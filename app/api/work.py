"""
Work API Route

Demo endpoint that produces a chained transaction: sub-requests, internal
redirects, CPU work and an optional child process. The accounting middleware
publishes the resulting metrics on the last request of the chain.
"""

import subprocess
import sys
import time

from fastapi import APIRouter, Depends, Query, Request

from accounting.controller import AccountingController
from app.chain import internal_redirect, subrequest
from app.dependencies import current_controller
from schemas.response import ChainHop, WorkResponse


router = APIRouter()


def _spin(milliseconds: int) -> None:
    """Burn CPU for roughly the given wall-clock time."""
    deadline = time.perf_counter() + milliseconds / 1000
    while time.perf_counter() < deadline:
        sum(i * i for i in range(1000))


@router.get("/work", response_model=WorkResponse)
def work(
    request: Request,
    redirects: int = Query(0, ge=0, le=10, description="Internal redirects to follow"),
    subrequests: int = Query(0, ge=0, le=10, description="Sub-requests to issue"),
    spin_ms: int = Query(0, ge=0, le=5000, description="CPU work in milliseconds"),
    spawn_child: bool = Query(False, description="Run and reap one child process"),
    controller: AccountingController = Depends(current_controller),
) -> WorkResponse:
    """
    Build the chain, do the work.

    Flow:
    1. Issue sub-requests from the main request
    2. Follow internal redirects; the last one becomes the chain tail
    3. Spin the CPU and optionally run a child process
    """
    node = request.state.accounting_node
    chain = [ChainHop(uri=node.uri, kind="main")]

    for index in range(subrequests):
        child = subrequest(node, f"{node.uri}/sub/{index}", controller)
        chain.append(ChainHop(uri=child.uri, kind="subrequest"))

    current = node
    for index in range(redirects):
        current = internal_redirect(current, f"{node.uri}/redirect/{index}", controller)
        chain.append(ChainHop(uri=current.uri, kind="redirect"))

    _spin(spin_ms)

    child_exit_code = -1
    if spawn_child:
        child_exit_code = subprocess.run([sys.executable, "-c", "pass"], check=False).returncode

    return WorkResponse(
        request_id=node.request_id,
        chain=chain,
        spun_ms=spin_ms,
        child_exit_code=child_exit_code,
    )
