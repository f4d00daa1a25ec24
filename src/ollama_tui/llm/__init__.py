from .base import GenerationClient
from .decoder import DecodeBuffer, decode_line, decode_stream
from .errors import (
    ApiResponseError,
    OllamaError,
    RequestError,
    ResponseDecodeError,
    StreamReadError,
)
from .models import (
    DecodeFailure,
    GenerateChunk,
    GenerateRequest,
    ModelInfo,
    StreamToken,
    TagsResponse,
)
from .ollama import DEFAULT_BASE_URL, OllamaClient

__all__ = [
    "DEFAULT_BASE_URL",
    "ApiResponseError",
    "DecodeBuffer",
    "DecodeFailure",
    "GenerateChunk",
    "GenerateRequest",
    "GenerationClient",
    "ModelInfo",
    "OllamaClient",
    "OllamaError",
    "RequestError",
    "ResponseDecodeError",
    "StreamReadError",
    "StreamToken",
    "TagsResponse",
    "decode_line",
    "decode_stream",
]
