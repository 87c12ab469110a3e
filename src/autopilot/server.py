# -*- coding: utf-8 -*-
# Copyright 2018-2019 John Akagi and Jacob Willis
# Copyright 2019-2020 Sequoia Ploeg

"""
The HTTP command interface of the replanning service.

Routes are plain functions, so the server runs them on its thread pool: a
replan blocked on telemetry never delays ``/api/alive``.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from autopilot.errors import (
    NotReadyError,
    PlannerBusyError,
    UpstreamError,
)

_module_logger = logging.getLogger(__name__)

ERROR_STATUS = {
    NotReadyError: 503,
    UpstreamError: 502,
    PlannerBusyError: 409,
}


def create_application(manager):
    """
    Creates the FastAPI application routing commands to `manager`.

    Parameters
    ----------
    manager : autopilot.manager.ReplanManager

    Returns
    -------
    fastapi.FastAPI
    """
    _logger = _module_logger.getChild('create_application')

    app = FastAPI(title="Autopilot", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.manager = manager

    @app.get("/api/alive", response_class=PlainTextResponse)
    def alive():
        return manager.handle_liveness()

    @app.post("/api/update_path")
    def update_path():
        return manager.handle_replan().to_dict()

    def replan_failed(request: Request, exc):
        status = next(code for kind, code in ERROR_STATUS.items() if isinstance(exc, kind))
        _logger.error("{} {} failed: {}".format(request.method, request.url.path, exc))
        return JSONResponse({"error": exc.kind, "detail": str(exc)}, status_code=status)

    for kind in ERROR_STATUS:
        app.add_exception_handler(kind, replan_failed)

    @app.exception_handler(StarletteHTTPException)
    def not_found(request: Request, exc):
        # unknown paths and wrong methods on known paths are both not found
        if exc.status_code in (404, 405):
            return PlainTextResponse("Not Found", status_code=404)
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code)

    return app
