"""FastAPI application factory"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from finplanner.api.middleware import RequestIDMiddleware, MetricsMiddleware
from finplanner.api.v1 import calendar, cards, categories, goals, investments, recurring, summary, transactions
from finplanner.infrastructure.database.models import Base
from finplanner.infrastructure.database.session import engine
from finplanner.infrastructure.observability.logging import setup_logging
from finplanner.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.create_tables_on_startup:
        Base.metadata.create_all(bind=engine)
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="finplanner",
        description="Personal finance ledger, financial calendar and portfolio service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Last added = first executed
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(recurring.router, prefix="/v1", tags=["recurring"])
    app.include_router(calendar.router, prefix="/v1", tags=["calendar"])
    app.include_router(cards.router, prefix="/v1", tags=["cards"])
    app.include_router(investments.router, prefix="/v1", tags=["investments"])
    app.include_router(goals.router, prefix="/v1", tags=["goals"])
    app.include_router(categories.router, prefix="/v1", tags=["categories"])
    app.include_router(summary.router, prefix="/v1", tags=["summary"])

    return app


app = create_app()
