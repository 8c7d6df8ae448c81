"""Index API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool

from note_assistant.api.dependencies import get_session
from note_assistant.core.errors import ServiceError
from note_assistant.models.dto import IndexRequest, IndexResponse
from note_assistant.session import AssistantSession

router = APIRouter()


@router.post("", response_model=IndexResponse, summary="Reconcile the index with the notes folder")
async def trigger_index(
    request: IndexRequest | None = None,
    session: AssistantSession = Depends(get_session),
) -> IndexResponse:
    rebuild = request.rebuild if request else False
    try:
        stats = await run_in_threadpool(session.reindex, rebuild)
    except ServiceError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return IndexResponse(stats=stats.to_dict())
