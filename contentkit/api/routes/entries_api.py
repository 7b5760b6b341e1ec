"""
Content API - /api/{typeSlug}[/{entryId}] over HTTP.

Thin transport around ApiRouter: decodes the JSON body, forwards the
query string and the trusted X-Author-Id header, and maps the envelope
to an HTTP status.
"""

from __future__ import annotations

import json
from typing import Any
from uuid import uuid4

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from contentkit.api.deps import envelope_response, get_api_router
from contentkit.api.envelope import BAD_REQUEST, fail
from contentkit.api.router import ApiRequest, ApiRouter

router = APIRouter()

# Every verb reaches ApiRouter, which answers unsupported ones itself
_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


class _InvalidJson(Exception):
    pass


async def _read_body(request: Request) -> Any:
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError as e:
        raise _InvalidJson(str(e)) from e


@router.api_route("/{path:path}", methods=_ALL_METHODS)
async def content_api(
    path: str,
    request: Request,
    api_router: ApiRouter = Depends(get_api_router),
) -> JSONResponse:
    headers = {"X-Request-ID": uuid4().hex}

    try:
        body = await _read_body(request)
    except _InvalidJson:
        response = fail(
            BAD_REQUEST,
            "Invalid JSON in request body",
            ["Request body must contain valid JSON"],
        )
        return envelope_response(response, headers)

    api_request = ApiRequest(
        method=request.method,
        path=f"/api/{path}",
        body=body,
        query=dict(request.query_params),
        author_id=request.headers.get("x-author-id"),
    )
    response = await run_in_threadpool(api_router.route, api_request)
    return envelope_response(response, headers)
