"""Pydantic DTOs exposed via API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class IndexRequest(BaseModel):
    rebuild: bool = Field(default=False, description="Embed every document again from scratch")


class IndexResponse(BaseModel):
    stats: dict[str, int]


class AskRequest(BaseModel):
    question: str


class AnswerResponse(BaseModel):
    error: bool
    text: str


class StatusResponse(BaseModel):
    indexed: bool
    stored: bool
    chunks: int
    documents: int
    dimension: int | None
    reindexing: bool


__all__ = [
    "IndexRequest",
    "IndexResponse",
    "AskRequest",
    "AnswerResponse",
    "StatusResponse",
]
