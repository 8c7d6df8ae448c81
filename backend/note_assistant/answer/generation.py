"""Text-generation capability."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Protocol

import requests

from note_assistant.core.errors import GenerationServiceError
from note_assistant.utils.http import post_json


@dataclass(frozen=True, slots=True)
class GenerationOptions:
    temperature: float = 0.0
    max_tokens: int = 150
    top_p: float = 1.0
    frequency_penalty: float = 0.0
    presence_penalty: float = 0.0
    stop: str | None = None


class GenerationService(Protocol):
    """Maps a prompt to generated text; ``None`` when the service produced none."""

    def complete(self, prompt: str, options: GenerationOptions) -> str | None: ...


class OpenAICompletionService:
    """Generation capability backed by an OpenAI-compatible ``/completions`` endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-3.5-turbo-instruct",
        api_base: str = "https://api.openai.com/v1",
        timeout: float = 60.0,
        session: requests.Session | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.url = f"{api_base.rstrip('/')}/completions"
        self.timeout = timeout
        self._session = session

    def complete(self, prompt: str, options: GenerationOptions) -> str | None:
        payload = {"prompt": prompt, "model": self.model, **asdict(options)}
        body = post_json(
            self.url,
            payload,
            api_key=self.api_key,
            timeout=self.timeout,
            error_cls=GenerationServiceError,
            session=self._session,
        )
        choices = body.get("choices")
        if not isinstance(choices, list):
            raise GenerationServiceError("Malformed completion reply")
        if not choices:
            return None
        text = choices[0].get("text") if isinstance(choices[0], dict) else None
        return text if isinstance(text, str) else None


__all__ = ["GenerationOptions", "GenerationService", "OpenAICompletionService"]
