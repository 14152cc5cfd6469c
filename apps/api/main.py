from __future__ import annotations

import logging
import os
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response
from fastapi.staticfiles import StaticFiles

from crosscut_site.content import DailyNotes
from crosscut_site.dependencies import get_settings
from crosscut_site.domain.exceptions import ConfigurationError, NoteNotFound
from crosscut_site.pages import daily_notes_page, not_found_page, single_daily_note_page
from crosscut_site.routing import (
    IndexPage,
    LegacyRedirect,
    NotePage,
    Redirect,
    RouteRequest,
    decide_route,
)


def create_app() -> FastAPI:
    # No generated docs: every path not handled below belongs to the static files.
    app = FastAPI(title="Crosscut", version="0.0.0", docs_url=None, redoc_url=None, openapi_url=None)

    settings = get_settings()
    site = settings.site
    notes = DailyNotes(settings.content_dir)
    notes.check()
    if not settings.static_dir.is_dir():
        raise ConfigurationError(f"static_dir_missing: {settings.static_dir}")
    static = StaticFiles(directory=settings.static_dir, html=True)

    logger = logging.getLogger("crosscut.site")

    @app.middleware("http")
    async def request_id_and_logging(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            dt_ms = (time.perf_counter() - start) * 1000.0
            logger.exception("request_error", extra={"rid": request_id, "path": request.url.path, "ms": dt_ms})
            return JSONResponse(
                status_code=500,
                content={"detail": "internal_error", "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )

        dt_ms = (time.perf_counter() - start) * 1000.0
        if settings.debug_log:
            logger.info(
                "request",
                extra={
                    "rid": request_id,
                    "method": request.method,
                    "host": request.url.hostname,
                    "path": request.url.path,
                    "query": request.url.query,
                    "status": response.status_code,
                    "ms": dt_ms,
                },
            )
        else:
            logger.info(
                "request",
                extra={
                    "rid": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code,
                    "ms": dt_ms,
                },
            )
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(ConfigurationError)
    async def configuration_error(request: Request, exc: ConfigurationError):
        request_id = getattr(request.state, "request_id", None)
        logger.error("configuration_error", extra={"rid": request_id, "path": request.url.path, "error": str(exc)})
        return JSONResponse(
            status_code=500,
            content={"detail": "configuration_error", "request_id": request_id},
        )

    @app.api_route("/{path:path}", methods=["GET", "HEAD"], include_in_schema=False)
    async def dispatch(request: Request) -> Response:
        url = request.url
        raw_path = request.scope.get("raw_path", b"").decode("latin-1").split("?", 1)[0]
        decision = decide_route(
            RouteRequest(
                host=url.hostname or "",
                path=url.path,
                query=url.query,
                origin=f"{url.scheme}://{url.netloc}",
                raw_path=raw_path,
            ),
            site,
        )

        if isinstance(decision, (LegacyRedirect, Redirect)):
            return RedirectResponse(decision.location, status_code=decision.status_code)

        if isinstance(decision, IndexPage):
            dates = await run_in_threadpool(notes.list_dates)
            return HTMLResponse(daily_notes_page(site, dates))

        if isinstance(decision, NotePage):
            try:
                note = await run_in_threadpool(notes.read, decision.date)
            except NoteNotFound:
                logger.info("note_not_found", extra={"rid": request.state.request_id, "date": decision.date})
                return HTMLResponse(not_found_page(site, url.path), status_code=404)
            dates = await run_in_threadpool(notes.list_dates)
            return HTMLResponse(single_daily_note_page(site, note, dates))

        # StaticFallback; same normalisation as StaticFiles.get_path
        static_path = os.path.normpath(os.path.join(*decision.path.split("/")))
        return await static.get_response(static_path, request.scope)

    return app
