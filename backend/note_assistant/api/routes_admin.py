"""Administrative routes for Note Assistant."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from note_assistant.api.dependencies import get_session
from note_assistant.core.metrics import metrics_response
from note_assistant.models.dto import StatusResponse
from note_assistant.session import AssistantSession

router = APIRouter()


@router.get("/status", response_model=StatusResponse, summary="Describe the loaded index")
async def status(session: AssistantSession = Depends(get_session)) -> StatusResponse:
    return StatusResponse(**session.status())


@router.get("/metrics", summary="Prometheus metrics")
async def metrics() -> Response:
    return metrics_response()
