"""Question API routes."""

from __future__ import annotations

import time

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from note_assistant.api.dependencies import get_session
from note_assistant.core.metrics import REQUEST_LATENCY
from note_assistant.models.dto import AnswerResponse, AskRequest
from note_assistant.session import AssistantSession

router = APIRouter()


@router.post("/ask", response_model=AnswerResponse, summary="Answer a question from the indexed notes")
async def ask(
    request: AskRequest,
    session: AssistantSession = Depends(get_session),
) -> AnswerResponse:
    start_time = time.perf_counter()
    answer = await run_in_threadpool(session.ask, request.question)
    REQUEST_LATENCY.labels(endpoint="ask", method="POST").observe(time.perf_counter() - start_time)
    return AnswerResponse(error=answer.error, text=answer.text)
