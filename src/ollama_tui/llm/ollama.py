from collections.abc import AsyncIterator
from typing import Any

import httpx
from pydantic import ValidationError

from .base import GenerationClient
from .decoder import decode_stream
from .errors import ApiResponseError, RequestError, ResponseDecodeError, StreamReadError
from .models import GenerateRequest, StreamToken, TagsResponse

DEFAULT_BASE_URL = "http://127.0.0.1:11434"
LIST_MODELS_TIMEOUT = 15.0
GENERATE_TIMEOUT = 300.0  # generation is long-running


def _describe(error: Exception) -> str:
    return str(error) or type(error).__name__


class OllamaClient(GenerationClient):
    """Client for a local Ollama server using httpx.

    Hidden design decisions:
    - One pooled ``httpx.AsyncClient`` shared by every call
    - A short timeout for listing models, a long one for generation
    - The generate body is consumed as an open NDJSON stream
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        list_timeout: float = LIST_MODELS_TIMEOUT,
        generate_timeout: float = GENERATE_TIMEOUT,
        **client_kwargs: Any
    ):
        """Initialize the Ollama client.

        Args:
            base_url: Server root URL (default: http://127.0.0.1:11434)
            list_timeout: Seconds allowed for ``GET /api/tags``
            generate_timeout: Seconds allowed for ``POST /api/generate``
            **client_kwargs: Additional kwargs for httpx.AsyncClient
        """
        self._base_url = base_url.rstrip("/")
        self._list_timeout = list_timeout
        self._generate_timeout = generate_timeout
        self._client = httpx.AsyncClient(base_url=self._base_url, **client_kwargs)

    @property
    def base_url(self) -> str:
        """Get the server root URL."""
        return self._base_url

    async def list_models(self) -> list[str]:
        """List installed model names via ``GET /api/tags``.

        Returns:
            Model names in the order the server reports them

        Raises:
            RequestError: If the server could not be reached in time
            ApiResponseError: If the server answered with a non-2xx status
            ResponseDecodeError: If the body is not a tags document
        """
        try:
            response = await self._client.get("/api/tags", timeout=self._list_timeout)
        except httpx.HTTPError as e:
            raise RequestError(_describe(e)) from e

        if not response.is_success:
            raise ApiResponseError(response.status_code, response.text, response.reason_phrase)

        try:
            tags = TagsResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise ResponseDecodeError(f"Invalid tags response: {e}") from e
        return [model.name for model in tags.models]

    async def generate(self, model: str, prompt: str) -> AsyncIterator[StreamToken]:
        """Stream a reply via ``POST /api/generate``.

        Args:
            model: Model name
            prompt: Prompt text

        Yields:
            Decoded records and per-line decode failures, in arrival order

        Raises:
            RequestError: If the request failed before a response arrived
            ApiResponseError: If the server answered with a non-2xx status
            StreamReadError: If the connection failed mid-stream
        """
        request = GenerateRequest(model=model, prompt=prompt)
        try:
            async with self._client.stream(
                "POST",
                "/api/generate",
                json=request.model_dump(),
                timeout=self._generate_timeout,
            ) as response:
                if not response.is_success:
                    raise ApiResponseError(
                        response.status_code,
                        await self._read_error_body(response),
                        response.reason_phrase,
                    )
                async for token in decode_stream(self._read_body(response)):
                    yield token
        except httpx.HTTPError as e:
            raise RequestError(_describe(e)) from e

    async def _read_body(self, response: httpx.Response) -> AsyncIterator[bytes]:
        try:
            async for data in response.aiter_bytes():
                yield data
        except httpx.HTTPError as e:
            raise StreamReadError(_describe(e)) from e

    async def _read_error_body(self, response: httpx.Response) -> str:
        try:
            await response.aread()
        except httpx.HTTPError:
            return "Failed to read error body"
        return response.text

    async def close(self) -> None:
        """Close the underlying httpx client."""
        await self._client.aclose()
