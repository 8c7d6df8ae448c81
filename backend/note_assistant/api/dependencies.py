"""Shared FastAPI dependencies."""

from __future__ import annotations

from functools import lru_cache

from note_assistant.core.config import Settings, get_settings
from note_assistant.session import AssistantSession, build_session

_SESSION: AssistantSession | None = None


@lru_cache(maxsize=1)
def get_app_settings() -> Settings:
    return get_settings()


def get_session() -> AssistantSession:
    global _SESSION
    if _SESSION is None:
        _SESSION = build_session(get_app_settings())
    return _SESSION


def close_session() -> None:
    global _SESSION
    if _SESSION is not None:
        _SESSION.close()
        _SESSION = None


__all__ = ["get_app_settings", "get_session", "close_session"]
