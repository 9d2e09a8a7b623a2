import logging
from contextlib import asynccontextmanager
import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import SQLModel

from src.adapter.services.fiscal_authority_client import create_fiscal_authority_client
from src.api.error import register_error_handlers
from src.api.routes import bookings
from src.depends import engine

logger = logging.getLogger(__name__)


def create_app(config) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if config.DB_AUTO_CREATE_TABLES:
            async with engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)

        http_client = httpx.AsyncClient(timeout=float(config.GST_API_TIMEOUT_SECONDS))
        app.state.fiscal_client = create_fiscal_authority_client(config, client=http_client)
        logger.info("Invoicing service started")
        try:
            yield
        finally:
            await http_client.aclose()
            await engine.dispose()
            logger.info("Invoicing service stopped")

    app = FastAPI(title="Booking Invoicing Service", lifespan=lifespan)
    app.state.config = config

    if config.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.CORS_ORIGINS,
            allow_credentials=config.CORS_ALLOW_CREDENTIALS,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_error_handlers(app)
    app.include_router(bookings.router, prefix=config.API_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    return app
