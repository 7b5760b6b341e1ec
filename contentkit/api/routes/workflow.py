"""
Admin API for the publication workflow.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from contentkit.api.deps import envelope_response, get_engine
from contentkit.api.envelope import NOT_FOUND, VALIDATION_ERROR, fail, ok
from contentkit.api.render import render_entry
from contentkit.api.schemas import ScheduleBody
from contentkit.components.workflow import WorkflowOutput
from contentkit.domain.entities import ContentEntry
from contentkit.services.engine import ContentEngine

router = APIRouter()


def _render(engine: ContentEngine, entry: ContentEntry) -> dict:
    return render_entry(entry, engine.schemas.get(entry.content_type_id))


def _workflow_result(engine: ContentEngine, result: WorkflowOutput) -> JSONResponse:
    if result.success and result.entry is not None:
        return envelope_response(ok({"entry": _render(engine, result.entry)}))
    messages = [e.message for e in result.errors]
    if any(e.code == "not_found" for e in result.errors):
        return envelope_response(fail(NOT_FOUND, messages[0], messages))
    return envelope_response(fail(VALIDATION_ERROR, "Transition rejected", messages))


@router.get("/due")
def list_due(
    now: datetime | None = None,
    engine: ContentEngine = Depends(get_engine),
) -> JSONResponse:
    due = engine.workflow.find_due(now)
    return envelope_response(ok({"entries": [_render(engine, e) for e in due]}))


@router.post("/promote-due")
def promote_due(engine: ContentEngine = Depends(get_engine)) -> JSONResponse:
    promoted = engine.promote_due()
    return envelope_response(
        ok({"promoted": len(promoted), "entries": [_render(engine, e) for e in promoted]})
    )


@router.post("/{entry_id}/publish")
def publish(entry_id: str, engine: ContentEngine = Depends(get_engine)) -> JSONResponse:
    return _workflow_result(engine, engine.workflow.publish(entry_id))


@router.post("/{entry_id}/unpublish")
def unpublish(entry_id: str, engine: ContentEngine = Depends(get_engine)) -> JSONResponse:
    return _workflow_result(engine, engine.workflow.unpublish(entry_id))


@router.post("/{entry_id}/schedule")
def schedule(
    entry_id: str,
    body: ScheduleBody,
    engine: ContentEngine = Depends(get_engine),
) -> JSONResponse:
    return _workflow_result(engine, engine.workflow.schedule(entry_id, body.scheduled_at))


@router.post("/{entry_id}/unschedule")
def unschedule(entry_id: str, engine: ContentEngine = Depends(get_engine)) -> JSONResponse:
    return _workflow_result(engine, engine.workflow.unschedule(entry_id))


@router.post("/{entry_id}/archive")
def archive(entry_id: str, engine: ContentEngine = Depends(get_engine)) -> JSONResponse:
    return _workflow_result(engine, engine.workflow.archive(entry_id))
