from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import Response

from .config import Settings, load_settings
from .storage import TOKEN_HEADER, BlobStore, FileBlobStore, handle_schedule

logger = logging.getLogger(__name__)

_ALL_METHODS = ["GET", "PUT", "OPTIONS", "POST", "DELETE", "PATCH"]


async def _raw_body(request: Request) -> bytes:
    return await request.body()


def create_app(settings: Optional[Settings] = None, store: Optional[BlobStore] = None) -> FastAPI:
    """
    Schedule storage endpoint.

    Run with: uvicorn --factory montana_wfm.server:create_app
    """
    settings = settings or load_settings()
    if store is None and settings.store_dir:
        store = FileBlobStore(settings.store_dir)

    app = FastAPI(title="Montana WFM schedule store")

    @app.api_route("/schedule", methods=_ALL_METHODS)
    def schedule(request: Request, raw: bytes = Depends(_raw_body)) -> Response:
        res = handle_schedule(
            request.method,
            request.query_params.get("workspace"),
            raw or None,
            request.headers.get(TOKEN_HEADER),
            store=store,
            write_token=settings.write_token,
        )
        if res.status >= 500:
            logger.error("GET/PUT /schedule failed with %s", res.status)
        return Response(
            content=res.body,
            status_code=res.status,
            headers=res.headers,
            media_type="application/json",
        )

    return app
