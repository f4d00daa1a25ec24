"""Background work that feeds the event channel.

Hides how network calls turn into ``AppEvent``s. Each function is meant
to run as its own task; it talks to the interface only through an
``EventSender`` and never touches the state machine directly.
"""

from collections.abc import Callable

from ..llm.base import GenerationClient
from ..llm.errors import ApiResponseError, OllamaError, RequestError, StreamReadError
from ..llm.models import DecodeFailure
from .channel import ChannelClosed, EventSender
from .models import Chunk, Done, ModelsFetched, StreamError

DebugCallback = Callable[[str, str, str], None]


def _noop(level: str, component: str, message: str) -> None:
    pass


def _error_message(error: OllamaError) -> str:
    if isinstance(error, ApiResponseError):
        return f"API Error: {error}"
    if isinstance(error, StreamReadError):
        return f"Stream Read Error: {error}"
    if isinstance(error, RequestError):
        return f"Request Error: {error}"
    return str(error)


async def fetch_models(
    client: GenerationClient,
    sender: EventSender,
    debug: DebugCallback = _noop,
) -> None:
    """List the installed models and send exactly one ``ModelsFetched``."""
    try:
        event = ModelsFetched(models=await client.list_models())
    except OllamaError as e:
        debug("error", "HTTP", f"Listing models failed: {e}")
        event = ModelsFetched(error=e)

    try:
        await sender.send(event)
    except ChannelClosed:
        debug("error", "Worker", "Failed to send fetched models back to main loop.")


async def stream_generation(
    client: GenerationClient,
    model: str,
    prompt: str,
    sender: EventSender,
    debug: DebugCallback = _noop,
) -> None:
    """Stream one reply into the channel.

    Sends a ``Chunk`` per non-empty fragment, a ``StreamError`` per
    undecodable line (and keeps going), a single ``StreamError`` for a
    request, protocol or read failure, then exactly one ``Done``. Stops
    silently (apart from the debug trace) once the channel is closed.
    """
    try:
        await _forward_reply(client, model, prompt, sender, debug)
        await sender.send(Done())
    except ChannelClosed:
        debug("error", "Worker", f"Event channel closed while streaming from {model}. Stopping stream.")


async def _forward_reply(
    client: GenerationClient,
    model: str,
    prompt: str,
    sender: EventSender,
    debug: DebugCallback,
) -> None:
    chunks = 0
    try:
        async for token in client.generate(model, prompt):
            if isinstance(token, DecodeFailure):
                debug("warning", "Worker", token.message)
                await sender.send(StreamError(token.message))
                continue
            if token.response:
                chunks += 1
                await sender.send(Chunk(token.response))
    except OllamaError as e:
        message = _error_message(e)
        debug("error", "HTTP", message)
        await sender.send(StreamError(message))
        return
    debug("debug", "Worker", f"{model} finished after {chunks} chunk(s)")
