"""FastAPI application setup for Note Assistant."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from note_assistant.api.dependencies import close_session, get_app_settings, get_session
from note_assistant.api.routes_admin import router as admin_router
from note_assistant.api.routes_index import router as index_router
from note_assistant.api.routes_query import router as query_router
from note_assistant.core.logging import configure_logging

configure_logging()


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    """Load settings and the stored index on startup."""
    get_app_settings()
    get_session()
    yield
    close_session()


app = FastAPI(
    title="Note Assistant",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.include_router(index_router, prefix="/index", tags=["index"])
app.include_router(query_router, prefix="", tags=["query"])
app.include_router(admin_router, prefix="", tags=["admin"])


@app.get("/health", tags=["admin"])
def health() -> dict[str, bool]:
    """Simple liveness check."""
    return {"ok": True}
