"""
NeuroNotes Backend: AI Function Route Handlers
================================================

What:  POST /functions/v1/suggest-tags and POST /functions/v1/summarize-note.
How:   Each request is a single stateless round trip:
       preflight → parse body → call the gateway → reshape the reply.
Who:   Called by the dashboard's "AI Suggest" and "AI Summarize" actions.

Response Envelope:
    200  {"tags": [...]} / {"summary": "..."}
    400  {"error": "..."}   malformed body
    402  {"error": "..."}   gateway credits exhausted
    429  {"error": "..."}   gateway rate limit
    500  {"error": "..."}   anything else

    Every response, including OPTIONS preflight and errors, carries the
    CORS headers below.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Type, TypeVar

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from neuronotes.exceptions import NeuroNotesError, ValidationError
from neuronotes.schemas.functions import (
    FunctionErrorResponse,
    SuggestTagsRequest,
    SuggestTagsResponse,
    SummarizeNoteRequest,
    SummarizeNoteResponse,
)
from neuronotes.services.ai_gateway import ai_gateway_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions/v1", tags=["AI Functions"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

ERROR_RESPONSES: Dict[int | str, Dict[str, Any]] = {
    400: {"description": "Malformed request body", "model": FunctionErrorResponse},
    402: {"description": "AI credits exhausted", "model": FunctionErrorResponse},
    429: {"description": "AI rate limit exceeded", "model": FunctionErrorResponse},
    500: {"description": "AI gateway or configuration error", "model": FunctionErrorResponse},
}

RequestModel = TypeVar("RequestModel", bound=BaseModel)


async def _parse_body(request: Request, model: Type[RequestModel]) -> RequestModel:
    body = await request.body()
    try:
        return model.model_validate_json(body)
    except PydanticValidationError as e:
        fields = sorted(model.model_fields)
        raise ValidationError(
            message=f"Request body must be a JSON object with string fields: {', '.join(fields)}",
            context={"errors": e.error_count()},
        )


async def _run_function(name: str, handler: Callable[[], Awaitable[BaseModel]]) -> JSONResponse:
    """
    Run one function invocation and shape its response.

    Application errors keep their own status and message (the gateway
    errors carry deliberately generic messages). Unexpected exceptions
    become a 500 with the exception text.
    """
    try:
        result = await handler()
        return JSONResponse(content=result.model_dump(), headers=CORS_HEADERS)
    except NeuroNotesError as e:
        logger.error("Error in %s function: %s | Context: %s", name, e.message, e.context)
        return JSONResponse(
            status_code=e.status_code,
            content={"error": e.message},
            headers=CORS_HEADERS,
        )
    except Exception as e:
        logger.error("Error in %s function: %s", name, str(e), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": str(e) or "Unknown error"},
            headers=CORS_HEADERS,
        )


# ══════════════════════════════════════════════════════════════════════════
# CORS preflight
# ══════════════════════════════════════════════════════════════════════════


@router.options("/suggest-tags", include_in_schema=False)
@router.options("/summarize-note", include_in_schema=False)
async def preflight() -> Response:
    """Answer the browser preflight without touching the body."""
    return Response(status_code=200, headers=CORS_HEADERS)


# ══════════════════════════════════════════════════════════════════════════
# suggest-tags
# ══════════════════════════════════════════════════════════════════════════


@router.post(
    "/suggest-tags",
    response_model=SuggestTagsResponse,
    responses=ERROR_RESPONSES,
    summary="Suggest 3-5 tags for a note",
)
async def suggest_tags(request: Request) -> JSONResponse:
    async def handler() -> SuggestTagsResponse:
        body = await _parse_body(request, SuggestTagsRequest)
        tags = await ai_gateway_service.suggest_tags(body.title, body.content)
        return SuggestTagsResponse(tags=tags)

    return await _run_function("suggest-tags", handler)


# ══════════════════════════════════════════════════════════════════════════
# summarize-note
# ══════════════════════════════════════════════════════════════════════════


@router.post(
    "/summarize-note",
    response_model=SummarizeNoteResponse,
    responses=ERROR_RESPONSES,
    summary="Summarize a note",
)
async def summarize_note(request: Request) -> JSONResponse:
    async def handler() -> SummarizeNoteResponse:
        body = await _parse_body(request, SummarizeNoteRequest)
        summary = await ai_gateway_service.summarize_note(body.content)
        return SummarizeNoteResponse(summary=summary)

    return await _run_function("summarize-note", handler)
