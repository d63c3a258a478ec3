"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from magda_db.config import get_settings
from magda_db.db.session import SessionLocal
from magda_db.errors import setup_exception_handlers
from magda_db.routers import rows, tables

logger = logging.getLogger(__name__)


def _check_database() -> None:
    """Open one connection at process start so misconfiguration shows up early."""

    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Database check failed; continuing, requests will surface the error.")


@asynccontextmanager
async def lifespan(_: FastAPI):
    _check_database()
    yield


def create_app() -> FastAPI:
    """Build the API application."""

    settings = get_settings()
    application = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_exception_handlers(application)

    application.include_router(tables.router, prefix="/api", tags=["tables"])
    application.include_router(rows.router, prefix="/api", tags=["rows"])

    @application.get("/health")
    def health() -> dict[str, str]:
        """Simple health check endpoint."""

        return {"status": "ok"}

    return application


app = create_app()
