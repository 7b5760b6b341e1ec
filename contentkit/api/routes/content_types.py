"""
Admin API for content type definitions.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from contentkit.api.deps import envelope_response, get_engine
from contentkit.api.envelope import BAD_REQUEST, NOT_FOUND, VALIDATION_ERROR, fail, ok
from contentkit.api.render import render_type
from contentkit.api.schemas import CreateContentTypeBody, UpdateContentTypeBody
from contentkit.components.schema import (
    ContentTypeOutput,
    CreateContentTypeInput,
    UpdateContentTypeInput,
)
from contentkit.services.engine import ContentEngine

router = APIRouter()


def _type_result(result: ContentTypeOutput, status_code: int = 200) -> JSONResponse:
    if result.success and result.content_type is not None:
        return envelope_response(ok(render_type(result.content_type), status_code=status_code))
    messages = [e.message for e in result.errors]
    if any(e.code == "not_found" for e in result.errors):
        return envelope_response(fail(NOT_FOUND, messages[0], messages))
    return envelope_response(fail(VALIDATION_ERROR, "Validation failed", messages))


@router.get("")
def list_content_types(engine: ContentEngine = Depends(get_engine)) -> JSONResponse:
    return envelope_response(ok([render_type(t) for t in engine.schemas.list()]))


@router.post("")
def create_content_type(
    body: CreateContentTypeBody,
    engine: ContentEngine = Depends(get_engine),
) -> JSONResponse:
    result = engine.schemas.create(
        CreateContentTypeInput(
            name=body.name,
            display_name=body.display_name,
            description=body.description,
            fields=[f.to_input() for f in body.fields],
        )
    )
    return _type_result(result, status_code=201)


@router.get("/{type_id}")
def get_content_type(type_id: str, engine: ContentEngine = Depends(get_engine)) -> JSONResponse:
    content_type = engine.schemas.get(type_id)
    if content_type is None:
        message = f"Content type with identifier '{type_id}' not found"
        return envelope_response(fail(NOT_FOUND, message, [message]))
    return envelope_response(ok(render_type(content_type)))


@router.put("/{type_id}")
def update_content_type(
    type_id: str,
    body: UpdateContentTypeBody,
    engine: ContentEngine = Depends(get_engine),
) -> JSONResponse:
    result = engine.schemas.update(
        UpdateContentTypeInput(type_id=type_id, updates=body.to_updates())
    )
    return _type_result(result)


@router.delete("/{type_id}")
def delete_content_type(
    type_id: str, engine: ContentEngine = Depends(get_engine)
) -> JSONResponse:
    result = engine.delete_content_type(type_id)
    if result.success:
        return envelope_response(
            ok(
                {
                    "message": "Content type deleted successfully",
                    "deletedContentTypeId": type_id,
                    "entriesRemoved": result.entries_removed,
                }
            )
        )
    messages = [e.message for e in result.errors]
    code = NOT_FOUND if any(e.code == "not_found" for e in result.errors) else BAD_REQUEST
    return envelope_response(fail(code, messages[0] if messages else "Delete failed", messages))
