from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI

from accounting.controller import AccountingController
from app.api.work import router as api_router
from app.core.config import settings
from app.core.logging import configure_logging
from app.dependencies import current_controller, get_access_log_collector, get_accounting_controller
from app.middleware import AccountingMiddleware
from observability.collector import AccessLogCollector
from schemas.response import HealthResponse

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    yield

def create_app(
    controller: Optional[AccountingController] = None,
    collector: Optional[AccessLogCollector] = None,
    expose_headers: Optional[bool] = None,
) -> FastAPI:
    """
    Build the application.

    Tests pass their own controller/collector; the server uses the cached
    ones from app.dependencies.
    """
    controller = controller or get_accounting_controller()
    collector = collector or get_access_log_collector()

    app = FastAPI(
        title=settings.service_name,
        lifespan=lifespan
    )

    app.add_middleware(
        AccountingMiddleware,
        controller=controller,
        collector=collector,
        expose_headers=settings.expose_headers if expose_headers is None else expose_headers,
    )

    # Routes must see the same controller as the middleware
    app.state.accounting_controller = controller

    app.include_router(api_router, prefix="/v1")

    @app.get("/health", response_model=HealthResponse)
    async def health(
        accounting: AccountingController = Depends(current_controller),
    ) -> HealthResponse:
        return HealthResponse(
            service=settings.service_name,
            accounting_enabled=accounting.enabled,
            pending_transactions=len(accounting.store),
        )

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
