"""FastAPI boundary for log retrieval, administration and remote emission."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response
from pydantic import BaseModel

from applog.core.config import Settings
from applog.core.types import LogLevel
from applog.emitter.logger import AppLogger, default_logger
from applog.retrieval.query import LogRetrieval
from applog_api.auth import require_admin
from applog_api.auth import router as auth_router

logger = logging.getLogger(__name__)

DIGEST_FORMAT = "claude"


class ClientLogIn(BaseModel):
    """Log line posted by a browser or other remote caller.

    Any truthy ``message`` is accepted and stringified; a non-object
    ``context`` is kept under a ``value`` key.
    """

    level: Any = None
    message: Any = None
    context: Any = None


def build_app(app_logger: AppLogger | None = None, settings: Settings | None = None) -> FastAPI:
    """Build FastAPI app with the logger and settings kept in ``app.state``."""
    if app_logger is None:
        app_logger = default_logger(settings)
    settings = settings or app_logger.settings

    app = FastAPI(title="applog API", version="0.1.0")
    app.state.settings = settings
    app.state.logger = app_logger
    app.state.retrieval = LogRetrieval(app_logger)

    @app.get("/api/logs", dependencies=[Depends(require_admin)], response_model=None)
    def get_logs(
        request: Request,
        level: LogLevel | None = Query(None),
        limit: int | None = Query(None, ge=1),
        format: str | None = Query(None),
    ) -> Response | dict[str, Any]:
        retrieval: LogRetrieval = request.app.state.retrieval
        entries = retrieval.recent(level, limit)
        if format == DIGEST_FORMAT:
            return Response(content=retrieval.as_digest(entries), media_type="text/markdown")
        return retrieval.as_payload(entries)

    @app.delete("/api/logs", dependencies=[Depends(require_admin)])
    def clear_logs(request: Request) -> dict[str, object]:
        current: AppLogger = request.app.state.logger
        current.clear()
        current.info("Logs cleared by admin")
        return {"success": True}

    @app.post("/api/logs")
    def post_client_log(request: Request, body: ClientLogIn) -> dict[str, object]:
        if not body.message:
            raise HTTPException(status_code=400, detail="message_required")
        current: AppLogger = request.app.state.logger
        level = LogLevel.parse(body.level, LogLevel.INFO)
        message = body.message if isinstance(body.message, str) else str(body.message)
        if isinstance(body.context, dict):
            extra = body.context
        else:
            extra = {} if body.context is None else {"value": body.context}
        context = {
            **extra,
            "source": "client",
            "userAgent": request.headers.get("user-agent"),
        }
        if level is LogLevel.ERROR:
            current.error_with_context(message, context)
        else:
            current.emit(level, message, context)
        return {"success": True}

    @app.get("/api/logs/health", dependencies=[Depends(require_admin)])
    def log_health(request: Request) -> dict[str, Any]:
        stats = request.app.state.retrieval.stats()
        if stats["sink_failures"]:
            logger.warning("log_sink_degraded failures=%s", stats["sink_failures"])
        return stats

    app.include_router(auth_router)
    return app


app = build_app()

__all__ = ["app", "build_app"]
