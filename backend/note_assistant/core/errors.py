"""Error taxonomy for Note Assistant."""

from __future__ import annotations


class AssistantError(Exception):
    """Base class for every failure raised by the assistant core."""


class NotIndexedError(AssistantError):
    """No index has been loaded yet."""

    def __init__(self, message: str = "Data not loaded. Please index your notes first.") -> None:
        super().__init__(message)


class NoIndexError(NotIndexedError):
    """Retrieval was attempted against an index with nothing usable in it."""

    def __init__(self, message: str = "The index is empty. Please index your notes first.") -> None:
        super().__init__(message)


class ServiceError(AssistantError):
    """A remote capability call failed."""


class EmbeddingServiceError(ServiceError):
    """The embedding service failed or returned an unusable reply."""


class GenerationServiceError(ServiceError):
    """The text-generation service failed or returned an unusable reply."""


__all__ = [
    "AssistantError",
    "NotIndexedError",
    "NoIndexError",
    "ServiceError",
    "EmbeddingServiceError",
    "GenerationServiceError",
]
