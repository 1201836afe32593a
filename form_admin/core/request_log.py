from __future__ import annotations

import logging
import re
from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI, Request

REQUEST_ID_HEADER = "X-Request-ID"
_ACCEPTED_REQUEST_ID = re.compile(r"[A-Za-z0-9._-]{1,128}")
_LOG = logging.getLogger("form_admin.http")


def resolve_request_id(raw: str | None) -> str:
    candidate = (raw or "").strip()
    if _ACCEPTED_REQUEST_ID.fullmatch(candidate):
        return candidate
    return uuid4().hex


def level_for_status(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code in (401, 403):
        return logging.WARNING
    return logging.INFO


def install_request_logging(app: FastAPI) -> None:
    """Tag every request with an id and write one access line per response.

    Every response is marked ``Cache-Control: no-store``.
    """

    @app.middleware("http")
    async def _log_request(request: Request, call_next):
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        started = perf_counter()

        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["Cache-Control"] = "no-store"
        _LOG.log(
            level_for_status(response.status_code),
            "%s %s status=%s duration_ms=%.2f request_id=%s",
            request.method,
            request.url.path,
            response.status_code,
            (perf_counter() - started) * 1000.0,
            request_id,
        )
        return response
