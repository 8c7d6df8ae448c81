"""Tests for application configuration."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from note_assistant.core.config import Settings


def test_defaults() -> None:
    settings = Settings()
    assert settings.max_context_tokens == 1800
    assert settings.max_answer_tokens == 150
    assert settings.chunk_max_tokens == 500
    assert settings.stop_sequence is None
    assert settings.auto_update is False


def test_yaml_sections_are_flattened(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NASST_DB_PATH", raising=False)
    monkeypatch.delenv("NASST_NOTES_DIR", raising=False)
    config = tmp_path / "config.yaml"
    config.write_text(
        "storage:\n"
        "  db_path: ~/custom/index.db\n"
        "notes:\n"
        "  dir: /srv/notes\n"
        "  auto_update: true\n"
        "completion:\n"
        "  max_context_tokens: 900\n"
        "  stop_sequence: ''\n"
        "embeddings:\n"
        "  backend: hashed\n",
        encoding="utf-8",
    )
    settings = Settings.from_yaml(config)
    assert settings.db_path == Path("~/custom/index.db").expanduser()
    assert settings.notes_dir == Path("/srv/notes")
    assert settings.auto_update is True
    assert settings.max_context_tokens == 900
    assert settings.stop_sequence is None
    assert settings.embedding_backend == "hashed"


def test_env_overrides_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = tmp_path / "config.yaml"
    config.write_text("completion:\n  max_answer_tokens: 80\n", encoding="utf-8")
    monkeypatch.setenv("NASST_MAX_ANSWER_TOKENS", "42")
    monkeypatch.setenv("NASST_API_KEY", "sk-env")
    settings = Settings.from_yaml(config)
    assert settings.max_answer_tokens == 42
    assert settings.api_key == "sk-env"


def test_config_path_from_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = tmp_path / "other.yaml"
    config.write_text("openai:\n  api_base: http://localhost:8080/v1\n", encoding="utf-8")
    monkeypatch.setenv("NASST_CONFIG", str(config))
    assert Settings.from_yaml().api_base == "http://localhost:8080/v1"


def test_invalid_backend_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(embedding_backend="word2vec")
