"""
ApiRouter - transport-agnostic dispatch of /api requests.

Paths:
- GET    /api/status             static health payload
- GET    /api/{typeSlug}         list (page, limit, search, status)
- POST   /api/{typeSlug}         create
- GET    /api/{typeSlug}/{id}    get
- PUT    /api/{typeSlug}/{id}    update
- DELETE /api/{typeSlug}/{id}    delete

Every outcome is an envelope. Store-level absence becomes NOT_FOUND
here and nowhere else; unexpected exceptions are logged with their
stack trace and answered with a detail-free INTERNAL_SERVER_ERROR.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from contentkit.adapters.clock import SystemClock
from contentkit.api.envelope import (
    INTERNAL_SERVER_ERROR,
    ApiError,
    ApiResponse,
    BadRequestError,
    NotFoundError,
    RequestValidationError,
    fail,
    from_error,
    method_not_allowed,
    not_found,
    ok,
)
from contentkit.api.render import render_entry, render_type
from contentkit.api.schemas import CreateEntryBody, UpdateEntryBody
from contentkit.components.entries import (
    CreateEntryInput,
    EntryOutput,
    EntryStore,
    ListEntriesInput,
    UpdateEntryInput,
)
from contentkit.components.schema import SchemaRegistry
from contentkit.domain.entities import ENTRY_STATUSES, ContentEntry, ContentType
from contentkit.ports.clock import TimePort
from contentkit.rules.models import ApiRules

logger = logging.getLogger(__name__)

SUPPORTED_METHODS = ("GET", "POST", "PUT", "DELETE")


@dataclass(frozen=True)
class ApiRequest:
    """One request as seen by the router."""

    method: str
    path: str
    body: Any = None
    query: dict[str, str] = field(default_factory=dict)
    # Supplied by the auth collaborator; trusted as-is
    author_id: str | None = None


def _pydantic_details(exc: ValidationError) -> list[str]:
    details = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err["loc"]) or "body"
        details.append(f"{location}: {err['msg']}")
    return details


def _require_object(body: Any) -> dict[str, Any]:
    if not isinstance(body, dict):
        raise BadRequestError(
            "Request body is required",
            ["Request body must be a JSON object"],
        )
    return body


def _positive_int(query: dict[str, str], name: str, default: int) -> int:
    raw = query.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value < 1:
        raise BadRequestError(
            f"Invalid '{name}' parameter",
            [f"'{name}' must be a positive integer, got '{raw}'"],
        )
    return value


def _raise_for(result: EntryOutput) -> None:
    if result.success:
        return
    messages = [e.message for e in result.errors]
    if result.not_found:
        raise NotFoundError(messages[0], messages)
    raise RequestValidationError("Validation failed", messages)


class ApiRouter:
    """Routes ApiRequests to the schema registry and entry store."""

    def __init__(
        self,
        schemas: SchemaRegistry,
        entries: EntryStore,
        rules: ApiRules | None = None,
        time_port: TimePort | None = None,
    ) -> None:
        self._schemas = schemas
        self._entries = entries
        self._rules = rules or ApiRules()
        self._time = time_port or SystemClock()

    def route(self, request: ApiRequest) -> ApiResponse:
        started = time.monotonic()
        try:
            response = self._dispatch(request)
        except ApiError as exc:
            response = from_error(exc)
        except Exception:
            logger.exception("Unhandled error for %s %s", request.method, request.path)
            response = fail(INTERNAL_SERVER_ERROR, "Internal server error")

        elapsed_ms = int((time.monotonic() - started) * 1000)
        outcome = "SUCCESS" if response.success else response.body["error"]["code"]
        logger.info("%s %s -> %s (%dms)", request.method, request.path, outcome, elapsed_ms)
        return response

    # --- Dispatch ---

    def _dispatch(self, request: ApiRequest) -> ApiResponse:
        method = request.method.upper()
        parts = [p for p in request.path.split("/") if p]

        if len(parts) < 2 or parts[0] != "api" or len(parts) > 3:
            raise BadRequestError(
                "Invalid API path",
                [f"Path '{request.path}' does not match /api/{{contentType}}[/{{id}}]"],
            )

        if parts[1] == "status" and len(parts) == 2 and method == "GET":
            return ok(self._status())

        if method not in SUPPORTED_METHODS:
            raise method_not_allowed(method, request.path)

        type_slug = parts[1]
        entry_id = parts[2] if len(parts) == 3 else None

        if method == "GET":
            content_type = self._content_type(type_slug)
            if entry_id is None:
                return self._list(content_type, request.query)
            return self._get(content_type, entry_id)

        if method == "POST":
            if entry_id is not None:
                raise method_not_allowed(method, request.path)
            body = _require_object(request.body)
            return self._create(self._content_type(type_slug), body, request.author_id)

        if entry_id is None:
            raise BadRequestError(
                "Entry ID is required",
                [f"HTTP method '{method}' requires /api/{type_slug}/{{id}}"],
            )

        if method == "PUT":
            body = _require_object(request.body)
            return self._update(self._content_type(type_slug), entry_id, body)

        return self._delete(self._content_type(type_slug), entry_id)

    # --- Handlers ---

    def _status(self) -> dict[str, Any]:
        return {
            "status": "healthy",
            "timestamp": self._time.now_utc().isoformat(),
            "version": self._rules.version,
        }

    def _list(self, content_type: ContentType, query: dict[str, str]) -> ApiResponse:
        page = _positive_int(query, "page", self._rules.default_page)
        limit = min(_positive_int(query, "limit", self._rules.default_limit), self._rules.max_limit)

        status = query.get("status") or None
        if status is not None and status not in ENTRY_STATUSES:
            raise BadRequestError(
                "Invalid 'status' parameter",
                [f"'status' must be one of {', '.join(ENTRY_STATUSES)}"],
            )

        entries = self._entries.list(
            ListEntriesInput(
                content_type_id=content_type.id,
                status=status,
                search=query.get("search") or None,
            )
        )

        total = len(entries)
        start = (page - 1) * limit
        page_entries = entries[start : start + limit]

        return ok(
            {
                "entries": [render_entry(e, content_type) for e in page_entries],
                "contentType": render_type(content_type),
                "pagination": {
                    "page": page,
                    "limit": limit,
                    "total": total,
                    "totalPages": math.ceil(total / limit),
                    "hasNext": start + limit < total,
                    "hasPrev": page > 1,
                },
            }
        )

    def _get(self, content_type: ContentType, entry_id: str) -> ApiResponse:
        entry = self._owned_entry(content_type, entry_id)
        return ok(self._entry_payload(entry, content_type))

    def _create(
        self,
        content_type: ContentType,
        body: dict[str, Any],
        author_id: str | None,
    ) -> ApiResponse:
        try:
            parsed = CreateEntryBody.model_validate(body)
        except ValidationError as exc:
            raise BadRequestError("Invalid request body", _pydantic_details(exc)) from exc

        result = self._entries.create(
            CreateEntryInput(
                content_type_id=content_type.id,
                field_values=[fv.to_input() for fv in parsed.field_values],
                slug=parsed.slug,
                status=parsed.status,
                published_at=parsed.published_at,
                scheduled_at=parsed.scheduled_at,
                author_id=author_id or parsed.author_id,
            )
        )
        _raise_for(result)
        assert result.entry is not None
        return ok(self._entry_payload(result.entry, content_type), status_code=201)

    def _update(
        self,
        content_type: ContentType,
        entry_id: str,
        body: dict[str, Any],
    ) -> ApiResponse:
        self._owned_entry(content_type, entry_id)
        try:
            parsed = UpdateEntryBody.model_validate(body)
        except ValidationError as exc:
            raise BadRequestError("Invalid request body", _pydantic_details(exc)) from exc

        result = self._entries.update(
            UpdateEntryInput(entry_id=entry_id, updates=parsed.to_updates())
        )
        _raise_for(result)
        assert result.entry is not None
        return ok(self._entry_payload(result.entry, content_type))

    def _delete(self, content_type: ContentType, entry_id: str) -> ApiResponse:
        self._owned_entry(content_type, entry_id)
        if not self._entries.delete(entry_id):
            raise not_found("Entry", entry_id)
        return ok({"message": "Entry deleted successfully", "deletedEntryId": entry_id})

    # --- Lookups ---

    def _content_type(self, slug: str) -> ContentType:
        content_type = self._schemas.get_by_slug(slug)
        if content_type is None:
            raise not_found("Content type", slug)
        return content_type

    def _owned_entry(self, content_type: ContentType, entry_id: str) -> ContentEntry:
        entry = self._entries.get(entry_id)
        if entry is None or entry.content_type_id != content_type.id:
            raise not_found("Entry", entry_id)
        return entry

    def _entry_payload(self, entry: ContentEntry, content_type: ContentType) -> dict[str, Any]:
        return {
            "entry": render_entry(entry, content_type),
            "contentType": render_type(content_type),
        }
