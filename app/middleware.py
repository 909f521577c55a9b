"""
Accounting Middleware

Binds the accounting hooks to the HTTP request lifecycle.

- start: after Starlette has parsed the request, before any route runs
- stop:  after the route returns (or raises), before the access log record

DESIGN RULE: accounting never changes the response, except for the optional
X-Accounting-* headers.
"""

from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from accounting.chain import ChainCycleError
from accounting.controller import AccountingController
from accounting.metrics import METRIC_KEYS
from observability.collector import AccessLogCollector
from schemas.request import RequestNode


HEADER_PREFIX = "X-Accounting-"


class AccountingMiddleware(BaseHTTPMiddleware):
    """
    One RequestNode per incoming HTTP request.

    Routes reach it as ``request.state.accounting_node`` to extend the chain.
    """

    def __init__(
        self,
        app: ASGIApp,
        controller: AccountingController,
        collector: Optional[AccessLogCollector] = None,
        expose_headers: bool = False,
    ):
        super().__init__(app)
        self._controller = controller
        self._collector = collector
        self._expose_headers = expose_headers

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        node = RequestNode(method=request.method, uri=request.url.path)
        request.state.accounting_node = node
        self._controller.start(node)

        response: Optional[Response] = None
        error: Optional[str] = None
        try:
            response = await call_next(request)
        except Exception as e:
            error = f"{type(e).__name__}: {e}"
            raise
        finally:
            self._controller.stop(node)
            tail = self._tail_of(node)
            status_code = response.status_code if response is not None else 500

            if self._collector is not None:
                self._collector.capture(tail, status_code, METRIC_KEYS, error)

            if response is not None and self._expose_headers:
                for key in METRIC_KEYS:
                    if key in tail.notes:
                        response.headers[HEADER_PREFIX + key[len("ACC_"):]] = tail.notes[key]

        return response

    def _tail_of(self, node: RequestNode) -> RequestNode:
        try:
            return self._controller.resolver.resolve_tail(node)
        except ChainCycleError:
            return node
