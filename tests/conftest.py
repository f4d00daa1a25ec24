"""Pytest configuration and shared fixtures."""
import json

import httpx
import pytest

from ollama_tui.llm import OllamaClient

BASE_URL = "http://ollama.test"


def make_record(response: str, done: bool = False, model: str = "llama3") -> dict:
    """Build one generate-stream record as the server sends it."""
    return {
        "model": model,
        "created_at": "2024-05-01T12:00:00.000000Z",
        "response": response,
        "done": done,
    }


def to_ndjson(records: list[dict]) -> bytes:
    """Encode records as a newline-delimited JSON body."""
    return b"".join(
        json.dumps(record, ensure_ascii=False).encode("utf-8") + b"\n"
        for record in records
    )


async def iter_parts(parts: list[bytes]):
    """Async byte source yielding ``parts`` one network read at a time."""
    for part in parts:
        yield part


def make_client(handler) -> OllamaClient:
    """Create a client whose HTTP traffic is answered by ``handler``."""
    return OllamaClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))


@pytest.fixture
def reply_body():
    """Return a complete three-record reply body."""
    return to_ndjson([
        make_record("Hel"),
        make_record("lo"),
        make_record("", done=True),
    ])


@pytest.fixture
def tags_body():
    """Return a ``GET /api/tags`` body with two models."""
    return {
        "models": [
            {"name": "llama3:latest", "size": 4661224676, "digest": "abc"},
            {"name": "mistral:7b", "size": 4109865159, "digest": "def"},
        ]
    }
