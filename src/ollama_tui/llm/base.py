from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import Any

from .models import StreamToken


class GenerationClient(ABC):
    """Abstract base class for generation API clients.

    This module hides the design decision of how the generation API is
    reached. Implementations must handle:
    - HTTP client setup and per-call timeouts
    - Request body encoding
    - Streaming the response body through the stream decoder
    - Mapping transport and protocol failures onto ``OllamaError`` types

    Supports async context manager protocol for proper resource cleanup:
        async with client:
            names = await client.list_models()
    """

    @abstractmethod
    async def list_models(self) -> list[str]:
        """List the names of the installed models, in server order.

        Raises:
            OllamaError: On transport, protocol or decode failure
        """
        pass

    @abstractmethod
    def generate(self, model: str, prompt: str) -> AsyncIterator[StreamToken]:
        """Stream a reply for ``prompt`` from ``model``.

        Returns:
            Async iterator of decoded records and per-line decode failures.
            Iteration stops after the record marked ``done``.

        Raises:
            OllamaError: On transport or protocol failure (from iteration)
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""
        pass

    async def __aenter__(self) -> "GenerationClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
