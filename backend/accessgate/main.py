"""FastAPI application serving access decisions to the dashboard shell.

Operational goals:
- Policy loaded once at startup; invalid policy files fail the boot
- Unauthenticated callers get deny answers, not errors
- Request-id propagation and structured access logs
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from accessgate import __version__
from accessgate.api.router import router as api_router
from accessgate.core.settings import Settings
from accessgate.security.policy import init_policy


logger = logging.getLogger("accessgate")
logger.setLevel(logging.INFO)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    init_policy(settings)

    app = FastAPI(
        title="Laundry dashboard access API",
        version=__version__,
        openapi_url="/openapi.json",
        docs_url=None,
        redoc_url=None,
        description="Role-based access decisions for dashboard regions and navigation.",
    )

    # Frontend dev server
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    @app.middleware("http")
    async def request_id_and_access_log(request: Request, call_next: Callable):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        start = time.time()
        try:
            response = await call_next(request)
        except Exception:  # noqa: BLE001
            logger.exception("Unhandled error", extra={"request_id": request_id})
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal error."},
                headers={"x-request-id": request_id},
            )

        duration_ms = int((time.time() - start) * 1000)
        response.headers["x-request-id"] = request_id

        # No headers or bodies: tokens must never reach the logs.
        logger.info(
            json.dumps(
                {
                    "event": "access",
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": getattr(response, "status_code", None),
                    "duration_ms": duration_ms,
                }
            )
        )
        return response

    return app


app = create_app()
