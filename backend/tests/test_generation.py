"""Tests for the completion client."""

from __future__ import annotations

import pytest
import requests

from conftest import FakeHTTPSession, FakeResponse
from note_assistant.answer.generation import GenerationOptions, OpenAICompletionService
from note_assistant.core.errors import GenerationServiceError


def test_completion_request_uses_deterministic_options() -> None:
    session = FakeHTTPSession(FakeResponse(200, {"choices": [{"text": " By the fence."}]}))
    service = OpenAICompletionService(api_key="sk-test", api_base="http://example.test/v1/", session=session)
    text = service.complete("PROMPT", GenerationOptions(max_tokens=99, stop="\n"))
    assert text == " By the fence."
    call = session.calls[0]
    assert call["url"] == "http://example.test/v1/completions"
    assert call["json"] == {
        "prompt": "PROMPT",
        "model": "gpt-3.5-turbo-instruct",
        "temperature": 0.0,
        "max_tokens": 99,
        "top_p": 1.0,
        "frequency_penalty": 0.0,
        "presence_penalty": 0.0,
        "stop": "\n",
    }
    assert call["headers"]["Authorization"] == "Bearer sk-test"


@pytest.mark.parametrize(
    "body",
    [
        {"choices": []},
        {"choices": [{"text": None}]},
        {"choices": [{"finish_reason": "stop"}]},
    ],
)
def test_missing_completion_text_is_none(body) -> None:
    service = OpenAICompletionService(api_key="sk-test", session=FakeHTTPSession(FakeResponse(200, body)))
    assert service.complete("PROMPT", GenerationOptions()) is None


def test_reply_without_choices_is_rejected() -> None:
    service = OpenAICompletionService(api_key="sk-test", session=FakeHTTPSession(FakeResponse(200, {"id": "x"})))
    with pytest.raises(GenerationServiceError, match="Malformed"):
        service.complete("PROMPT", GenerationOptions())


def test_api_error_message_is_surfaced() -> None:
    session = FakeHTTPSession(FakeResponse(401, {"error": {"message": "Incorrect API key provided"}}))
    service = OpenAICompletionService(api_key="sk-bad", session=session)
    with pytest.raises(GenerationServiceError, match="Incorrect API key provided"):
        service.complete("PROMPT", GenerationOptions())


def test_transport_error_is_wrapped() -> None:
    session = FakeHTTPSession(exc=requests.Timeout("read timed out"))
    service = OpenAICompletionService(api_key="sk-test", session=session)
    with pytest.raises(GenerationServiceError, match="read timed out"):
        service.complete("PROMPT", GenerationOptions())
