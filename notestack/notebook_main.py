# notestack/notebook_main.py (Notebook 서비스 진입점)
import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI
from pydantic import ValidationError

from .api import notebook as notebook_router
from .core.bootstrap import build_service_app
from .core.config import NotebookServiceSettings, get_notebook_settings
from .core.logging_setup import setup_logging
from .models import Notebook

logger = logging.getLogger(__name__)


def create_app(settings: Optional[NotebookServiceSettings] = None) -> FastAPI:
    settings = settings or get_notebook_settings()
    app = build_service_app("Notebook Service", settings, tables=[Notebook.__table__])
    app.include_router(notebook_router.router)
    return app


def run() -> None:
    setup_logging()
    try:
        settings = get_notebook_settings()
    except ValidationError as exc:
        # 필수 설정이 없으면 반쯤 동작하는 상태로 뜨지 않고 종료
        logger.error("Missing or invalid configuration. Exiting...", extra={"details": str(exc)})
        raise SystemExit(1)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
