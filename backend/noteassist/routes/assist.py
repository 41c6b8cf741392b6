"""
NoteAssist Backend — AI Assist Route Handlers
===============================================

What:  POST /notes/ai/summarize, /notes/ai/fix-grammar, /notes/ai/auto-tag.
How:   Validates the body, hands the text to AssistService, returns its result.

These endpoints are stateless text transforms. They are not scoped to a
stored note, so there is no identity lookup and no ownership check.
"""

from fastapi import APIRouter, Depends

from noteassist.dependencies import get_assist_service
from noteassist.schemas.note import (
    AutoTagRequest,
    AutoTagResponse,
    ErrorResponse,
    FixGrammarRequest,
    FixGrammarResponse,
    SummarizeRequest,
    SummarizeResponse,
)
from noteassist.services.assist_service import AssistService

router = APIRouter(prefix="/notes/ai", tags=["AI Assist"])

_ERRORS = {
    400: {"description": "Empty or invalid text", "model": ErrorResponse},
    500: {"description": "Server misconfiguration", "model": ErrorResponse},
    503: {"description": "AI provider failed or blocked the content", "model": ErrorResponse},
}


@router.post(
    "/summarize",
    response_model=SummarizeResponse,
    responses=_ERRORS,
    summary="Summarize text in 2-3 sentences",
)
async def summarize(
    payload: SummarizeRequest,
    assist: AssistService = Depends(get_assist_service),
) -> SummarizeResponse:
    return await assist.summarize(payload.content)


@router.post(
    "/fix-grammar",
    response_model=FixGrammarResponse,
    responses=_ERRORS,
    summary="Fix grammar, spelling and punctuation",
)
async def fix_grammar(
    payload: FixGrammarRequest,
    assist: AssistService = Depends(get_assist_service),
) -> FixGrammarResponse:
    return await assist.fix_grammar(payload.content)


@router.post(
    "/auto-tag",
    response_model=AutoTagResponse,
    responses=_ERRORS,
    summary="Suggest up to five tags",
)
async def auto_tag(
    payload: AutoTagRequest,
    assist: AssistService = Depends(get_assist_service),
) -> AutoTagResponse:
    return await assist.auto_tag(payload.title, payload.content)
