"""Application configuration handling."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal, Mapping

import yaml
from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "NASST_"
DEFAULT_CONFIG_PATH = Path("~/.config/note-assistant/config.yaml")

_YAML_KEY_MAP: Mapping[tuple[str, ...], str] = {
    ("storage", "db_path"): "db_path",
    ("notes", "dir"): "notes_dir",
    ("notes", "include_glob"): "include_glob",
    ("notes", "exclude_glob"): "exclude_glob",
    ("notes", "auto_update"): "auto_update",
    ("openai", "api_key"): "api_key",
    ("openai", "api_base"): "api_base",
    ("openai", "request_timeout"): "request_timeout",
    ("embeddings", "backend"): "embedding_backend",
    ("embeddings", "model"): "embedding_model",
    ("embeddings", "chunk_max_tokens"): "chunk_max_tokens",
    ("completion", "model"): "completion_model",
    ("completion", "max_context_tokens"): "max_context_tokens",
    ("completion", "max_answer_tokens"): "max_answer_tokens",
    ("completion", "stop_sequence"): "stop_sequence",
}


class Settings(BaseModel):
    """Runtime configuration loaded from YAML file and environment variables."""

    db_path: Path = Field(default=Path.home() / ".note-assistant" / "index.db")
    notes_dir: Path = Field(default=Path.home() / "Notes")
    include_glob: str = "**/*.md"
    exclude_glob: str = "**/{.git,.obsidian,.trash}/**"
    api_key: str = ""
    api_base: str = "https://api.openai.com/v1"
    request_timeout: float = 60.0
    embedding_backend: Literal["openai", "hashed"] = "openai"
    embedding_model: str = "text-embedding-ada-002"
    completion_model: str = "gpt-3.5-turbo-instruct"
    chunk_max_tokens: int = Field(default=500, ge=1)
    max_context_tokens: int = Field(default=1800, ge=1)
    max_answer_tokens: int = Field(default=150, ge=1)
    stop_sequence: str | None = None
    auto_update: bool = False

    model_config = {
        "validate_assignment": True,
        "extra": "ignore",
    }

    @field_validator("db_path", "notes_dir", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        if isinstance(value, Path):
            return value.expanduser()
        if isinstance(value, str):
            return Path(value).expanduser()
        raise TypeError("paths must be a path or string")

    @field_validator("stop_sequence", mode="before")
    @classmethod
    def _empty_stop_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value:
            return None
        return value

    @classmethod
    def from_yaml(cls, path: Path | None = None) -> "Settings":
        """Load YAML config and overlay env vars; fall back to defaults."""
        config_path = cls._resolve_config_path(path)
        data: dict[str, Any] = {}
        if config_path and config_path.exists():
            with config_path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
            data.update(_flatten_yaml(raw))
        data.update(_load_env_overrides())
        return cls(**data)

    @staticmethod
    def _resolve_config_path(path: Path | None) -> Path | None:
        if path is not None:
            return path.expanduser()
        env_path = os.environ.get(f"{ENV_PREFIX}CONFIG")
        if env_path:
            return Path(env_path).expanduser()
        resolved_default = DEFAULT_CONFIG_PATH.expanduser()
        return resolved_default if resolved_default.exists() else None


def _flatten_yaml(raw: Mapping[str, Any], prefix: tuple[str, ...] = ()) -> dict[str, Any]:
    """Flatten nested YAML configuration to Settings field names."""
    flat: dict[str, Any] = {}
    for key, value in raw.items():
        next_prefix = prefix + (key,)
        if isinstance(value, Mapping):
            flat.update(_flatten_yaml(value, prefix=next_prefix))
        else:
            mapped_key = _YAML_KEY_MAP.get(next_prefix)
            if mapped_key:
                flat[mapped_key] = value
            elif key in Settings.model_fields:
                flat[key] = value
    return flat


def _load_env_overrides() -> dict[str, Any]:
    """Map environment variables with NASST_ prefix into Settings fields."""
    overrides: dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field_name = key[len(ENV_PREFIX) :].lower()
        if field_name in Settings.model_fields:
            overrides[field_name] = value
    return overrides


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings accessor for dependency injection."""
    return Settings.from_yaml()


__all__ = ["Settings", "get_settings"]
