"""Shared FastAPI assembly for both services.

Each service owns one table in its own database; ``build_service_app`` wires
settings, the engine/session factory, error handlers, request logging and the
health routes, then the service adds its own routers.
"""
import logging
from contextlib import asynccontextmanager
from typing import Sequence

from fastapi import FastAPI
from sqlalchemy import Table

from ..api import health as health_router
from ..database import build_engine, build_session_factory
from ..models import Base
from .config import ServiceSettings
from .errors import register_exception_handlers
from .logging_setup import add_request_logging, setup_logging

logger = logging.getLogger(__name__)


def build_service_app(title: str, settings: ServiceSettings, tables: Sequence[Table]) -> FastAPI:
    engine = build_engine(settings.database_url, echo=(settings.environment == "local"))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level)
        # 자기 서비스 소유 테이블만 생성
        Base.metadata.create_all(bind=engine, tables=list(tables))
        logger.info("Application startup completed", extra={"event": "app.ready", "details": title})
        yield
        engine.dispose()

    app = FastAPI(title=title, version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    register_exception_handlers(app)
    add_request_logging(app)
    app.include_router(health_router.router)
    return app
