"""Tests for the Textual application driven headless through a pilot."""
import asyncio

import httpx
import pytest

from conftest import make_client, make_record, to_ndjson
from ollama_tui.ui.app import OllamaTextualApp
from ollama_tui.ui.models import InputMode
from ollama_tui.ui.state import STATUS_DISCONNECTED, STATUS_RECEIVED


def ollama_server(request: httpx.Request) -> httpx.Response:
    """Serve one model and a two-fragment reply."""
    if request.url.path == "/api/tags":
        return httpx.Response(200, json={"models": [{"name": "m1"}]})
    body = to_ndjson([make_record("Hel"), make_record("lo"), make_record("", done=True)])
    return httpx.Response(200, content=body)


async def wait_for(condition, timeout: float = 5.0) -> None:
    """Yield to the app until ``condition()`` holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not condition():
        if loop.time() > deadline:
            raise AssertionError("Condition not met before timeout")
        await asyncio.sleep(0.02)


class TestOllamaTextualApp:
    """Tests for the frame loop, key routing and shutdown."""

    @pytest.mark.asyncio
    async def test_models_are_loaded_on_start(self):
        """Test that the catalog is fetched and the first model selected."""
        async with make_client(ollama_server) as client:
            app = OllamaTextualApp(client, tick_interval=0.01)
            async with app.run_test():
                await wait_for(lambda: app.state.models == ["m1"])
                assert app.state.selected_model == "m1"

    @pytest.mark.asyncio
    async def test_prompt_round_trip(self):
        """Test typing a prompt, sending it and receiving the streamed reply."""
        async with make_client(ollama_server) as client:
            app = OllamaTextualApp(client, tick_interval=0.01)
            async with app.run_test() as pilot:
                await wait_for(lambda: app.state.models == ["m1"])

                await pilot.press("enter", "h", "i")
                assert app.state.input_mode is InputMode.EDITING
                assert app.state.input_buffer == "hi"

                await pilot.press("ctrl+s")
                await wait_for(lambda: app.state.status_message == STATUS_RECEIVED)

                assert [(turn.sender, turn.text) for turn in app.state.conversation] == [
                    ("You", "hi"),
                    ("m1", "Hello"),
                ]
                assert app.state.is_loading is False
            assert app.return_code == 0

    @pytest.mark.asyncio
    async def test_quit_key_exits_cleanly(self):
        """Test that q ends the app with return code 0."""
        async with make_client(ollama_server) as client:
            app = OllamaTextualApp(client, tick_interval=0.01)
            async with app.run_test() as pilot:
                await wait_for(lambda: app.state.models == ["m1"])
                await pilot.press("q")
                await wait_for(lambda: app.return_code is not None)

            assert app.state.should_quit is True
            assert app.return_code == 0

    @pytest.mark.asyncio
    async def test_disconnected_channel_exits_with_error(self):
        """Test that losing every sender ends the app with return code 1."""
        async with make_client(ollama_server) as client:
            app = OllamaTextualApp(client, tick_interval=0.01)
            async with app.run_test():
                await wait_for(lambda: app.state.models == ["m1"])
                await wait_for(lambda: app.channel.sender_count == 1)

                app.root_sender.close()
                await wait_for(lambda: app.return_code is not None)

            assert app.return_code == 1
            assert app.state.status_message == STATUS_DISCONNECTED
            assert app.state.should_quit is True

    @pytest.mark.asyncio
    async def test_frame_loop_after_shutdown_is_harmless(self):
        """Test that a late tick or redraw after teardown does not raise."""
        async with make_client(ollama_server) as client:
            app = OllamaTextualApp(client, tick_interval=0.01)
            async with app.run_test() as pilot:
                await wait_for(lambda: app.state.models == ["m1"])
                await pilot.press("enter", "h", "i", "ctrl+s")
                await wait_for(lambda: app.state.status_message == STATUS_RECEIVED)

            app._tick()
            app._redraw()
            assert app.state.conversation[-1].text == "Hello"
