import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

logger = logging.getLogger(__name__)

router = APIRouter(tags=["meta"])


@router.get("/health")
def health(request: Request):
    settings = request.app.state.settings
    return {"status": "ok", "service": request.app.title, "environment": settings.environment}


@router.get("/health/db")
def health_db(request: Request):
    try:
        with request.app.state.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"status": "ok", "database": "reachable"}
    except Exception:
        # 드라이버 오류 내용은 응답에 노출하지 않음
        logger.exception("Database health check failed", extra={"event": "health.db"})
        return JSONResponse(status_code=503, content={"status": "error", "database": "unreachable"})
