"""Agate AI — Abstract AI Provider."""

from abc import ABC, abstractmethod


class GenerationFailedError(Exception):
    """Raised when the provider call fails (transport, non-2xx, SDK error)."""

    def __init__(self, message: str, status_code: int = 0):
        self.status_code = status_code
        super().__init__(message)


class InvalidProviderResponseError(GenerationFailedError):
    """Raised when the provider answered but no usable text could be extracted."""


class AIProvider(ABC):
    """Abstract base for text generation against an external model.

    Providers send one rendered prompt and return the raw generated text.
    Every failure surfaces as GenerationFailedError (or its subclass) so the
    caller can degrade to mock output in one place.
    """

    name: str = ""

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """Send the prompt and return the generated text.

        Raises:
            GenerationFailedError: transport or HTTP-level failure.
            InvalidProviderResponseError: safety block, empty payload,
                error envelope or unrecognised response shape.
        """
        ...

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this provider is configured and ready."""
        ...
