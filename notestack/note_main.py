# notestack/note_main.py (Note 서비스 진입점)
import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI
from pydantic import ValidationError

from .api import note as note_router
from .core.bootstrap import build_service_app
from .core.config import NoteServiceSettings, get_note_settings
from .core.logging_setup import setup_logging
from .models import Note
from .services.notebook_lookup import NotebookLookupClient, build_lookup_client

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[NoteServiceSettings] = None,
    lookup: Optional[NotebookLookupClient] = None,
) -> FastAPI:
    settings = settings or get_note_settings()
    app = build_service_app("Note Service", settings, tables=[Note.__table__])
    app.state.notebook_lookup = lookup or build_lookup_client(settings)
    app.include_router(note_router.router)
    return app


def run() -> None:
    setup_logging()
    try:
        settings = get_note_settings()
    except ValidationError as exc:
        # NOTEBOOK_SERVICE_URL 등이 없으면 시작하지 않음
        logger.error("Missing or invalid configuration. Exiting...", extra={"details": str(exc)})
        raise SystemExit(1)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
