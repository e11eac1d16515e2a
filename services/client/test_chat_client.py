"""
Tests for the Chat Client — submit lifecycle, failure classification and
incremental rendering, against a stubbed relay.
Run with: pytest test_chat_client.py -v
"""

import asyncio
import json

import httpx
import pytest

from chat_client import ChatClient
from failures import extract_reply, error_text
from transcript import Transcript


# ── Helpers ──────────────────────────────────────────────────

class CountingTranscript(Transcript):
    def __init__(self):
        super().__init__()
        self.removed = []
        self.loading_changes = []

    def remove(self, message):
        self.removed.append(message)
        super().remove(message)

    def set_loading(self, is_loading):
        self.loading_changes.append(is_loading)
        super().set_loading(is_loading)


def _relay(status_code=200, body=None, content=None, calls=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(json.loads(request.content))
        if content is not None:
            return httpx.Response(status_code, content=content)
        return httpx.Response(status_code, json=body)

    return httpx.MockTransport(handler)


async def _online():
    return True


async def _offline():
    return False


def _client(transport, view=None, **kwargs):
    kwargs.setdefault("typing_delay", 0)
    kwargs.setdefault("is_online", _online)
    return ChatClient(view or CountingTranscript(), relay_url="http://relay.test/", transport=transport, **kwargs)


def _roles(view):
    return [m.role for m in view.messages]


def _assert_settled(view):
    assert not any(m.is_typing for m in view.messages)
    assert view.loading is False
    assert view.input_focused is True


# ── Submit lifecycle ─────────────────────────────────────────

class TestSubmit:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "\n\t "])
    async def test_blank_input_is_a_no_op(self, text):
        calls = []
        chat = _client(_relay(body={"reply": "x"}, calls=calls))
        await chat.submit(text)
        assert chat.view.messages == []
        assert calls == []
        assert chat.view.loading_changes == []

    @pytest.mark.asyncio
    async def test_hello_round_trip(self):
        calls = []
        chat = _client(_relay(body={"reply": "Hi there"}, calls=calls))
        await chat.submit("  Hello ")

        view = chat.view
        assert calls == [{"message": "Hello"}]
        assert _roles(view) == ["user", "ai"]
        assert view.messages[0].text == "Hello"
        assert view.messages[1].text == "Hi there"
        assert view.banner is None
        assert len(view.removed) == 1
        assert view.loading_changes == [True, False]
        _assert_settled(view)

    @pytest.mark.asyncio
    async def test_incremental_rendering_matches_full_text(self):
        chat = _client(_relay(body={"reply": "Hi there, friend"}), typing_delay=0.001, typing_chunk_size=4)
        scrolls_before = chat.view.scroll_count
        await chat.submit("Hello")

        assert chat.view.messages[-1].role == "ai"
        assert chat.view.messages[-1].text == "Hi there, friend"
        # user + placeholder + ai node, then one scroll per 4-char batch
        assert chat.view.scroll_count - scrolls_before == 3 + 4
        _assert_settled(chat.view)

    @pytest.mark.asyncio
    async def test_prior_messages_are_not_mutated(self):
        chat = _client(_relay(body={"reply": "second"}))
        chat.start()
        greeting = chat.view.messages[0]
        await chat.submit("Hello")
        assert chat.view.messages[0] is greeting
        assert greeting.text == "Hi! I'm CyberChat. Ask me anything."

    @pytest.mark.asyncio
    async def test_banner_cleared_by_next_submission(self):
        chat = _client(_relay(status_code=500, body={"error": "boom"}))
        await chat.submit("Hello")
        assert chat.view.banner == "boom"

        chat.transport = _relay(body={"reply": "fine now"})
        await chat.submit("Again")
        assert chat.view.banner is None
        assert chat.view.messages[-1].text == "fine now"

    @pytest.mark.asyncio
    async def test_blank_submission_still_hides_banner(self):
        chat = _client(_relay(status_code=500, body={"error": "boom"}))
        await chat.submit("Hello")
        await chat.submit("   ")
        assert chat.view.banner is None

    @pytest.mark.asyncio
    async def test_second_submission_ignored_while_loading(self):
        calls = []
        release = asyncio.Event()

        async def held(request):
            calls.append(json.loads(request.content))
            await release.wait()
            return httpx.Response(200, json={"reply": "done"})

        chat = _client(httpx.MockTransport(held))
        first = asyncio.create_task(chat.submit("one"))
        while not calls:
            await asyncio.sleep(0)
        assert chat.view.loading is True

        await chat.submit("two")
        release.set()
        await first

        assert calls == [{"message": "one"}]
        assert _roles(chat.view) == ["user", "ai"]
        assert chat.view.messages[0].text == "one"
        _assert_settled(chat.view)

    def test_clear_chat(self):
        chat = _client(_relay(body={"reply": "x"}))
        chat.start()
        chat.view.show_error_banner("old")
        chat.clear_chat()
        assert chat.view.messages == []
        assert chat.view.banner is None


# ── Failure classification ───────────────────────────────────

class TestFailures:
    async def _submit_and_get_error(self, chat, text="Hello"):
        await chat.submit(text)
        view = chat.view
        errors = [m for m in view.messages if m.role == "ai error"]
        assert len(errors) == 1
        assert len(view.removed) == 1
        _assert_settled(view)
        return errors[0].text, view.banner

    @pytest.mark.asyncio
    async def test_http_error_uses_server_error_text(self):
        chat = _client(_relay(status_code=500, body={"error": "boom"}))
        text, banner = await self._submit_and_get_error(chat)
        assert "boom" in text
        assert text == "Error: boom"
        assert banner == "boom"

    @pytest.mark.asyncio
    async def test_http_error_falls_back_to_message_field(self):
        chat = _client(_relay(status_code=404, body={"message": "no such route"}))
        _, banner = await self._submit_and_get_error(chat)
        assert banner == "no such route"

    @pytest.mark.asyncio
    async def test_http_error_without_body_embeds_status(self):
        chat = _client(_relay(status_code=503, content=b"<html>down</html>"))
        _, banner = await self._submit_and_get_error(chat)
        assert banner == "Server error: 503"

    @pytest.mark.asyncio
    async def test_timeout(self):
        async def slow(request):
            await asyncio.sleep(5)
            return httpx.Response(200, json={"reply": "too late"})

        chat = _client(httpx.MockTransport(slow), timeout=0.05)
        text, banner = await self._submit_and_get_error(chat)
        assert "timed out" in text
        assert banner == "Request timed out. Please try again."

    @pytest.mark.asyncio
    async def test_network_failure_while_online(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused")

        chat = _client(httpx.MockTransport(refuse))
        _, banner = await self._submit_and_get_error(chat)
        assert banner == "Unable to reach AI service."

    @pytest.mark.asyncio
    async def test_network_failure_while_offline(self):
        def refuse(request):
            raise httpx.ConnectError("network is unreachable")

        chat = _client(httpx.MockTransport(refuse), is_online=_offline)
        _, banner = await self._submit_and_get_error(chat)
        assert "offline" in banner

    @pytest.mark.asyncio
    async def test_application_error_wins_over_reply(self):
        chat = _client(_relay(body={"error": "quota exceeded", "reply": "ignored"}))
        _, banner = await self._submit_and_get_error(chat)
        assert banner == "quota exceeded"

    @pytest.mark.asyncio
    async def test_blank_application_error_uses_default_message(self):
        chat = _client(_relay(body={"error": "   "}))
        text, banner = await self._submit_and_get_error(chat)
        assert banner == "Unexpected error. Please try again."
        assert text == "Error: Unexpected error. Please try again."

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{"reply": "   "}, {}, None, [1, 2]])
    async def test_empty_reply(self, body):
        chat = _client(_relay(body=body))
        _, banner = await self._submit_and_get_error(chat)
        assert banner == "AI returned an empty response."

    @pytest.mark.asyncio
    async def test_unexpected_error_is_still_rendered(self):
        def explode(request):
            raise RuntimeError("bug")

        chat = _client(httpx.MockTransport(explode))
        _, banner = await self._submit_and_get_error(chat)
        assert banner == "Unexpected error. Please try again."

    @pytest.mark.asyncio
    async def test_client_stays_usable_after_failure(self):
        chat = _client(_relay(status_code=502, body={"error": "Model returned empty output."}))
        await chat.submit("Hello")
        chat.transport = _relay(body={"reply": "ok"})
        await chat.submit("Hello again")
        assert _roles(chat.view) == ["user", "ai error", "user", "ai"]


# ── Body helpers ─────────────────────────────────────────────

def test_extract_reply_accepts_alternate_fields():
    assert extract_reply("  bare  ") == "bare"
    assert extract_reply({"reply": "a", "response": "b"}) == "a"
    assert extract_reply({"reply": "", "response": "b"}) == "b"
    assert extract_reply({"text": " c "}) == "c"
    assert extract_reply({"reply": 5}) == ""
    assert extract_reply(None) == ""


def test_error_text_prefers_error_field():
    assert error_text({"error": "e", "message": "m"}) == "e"
    assert error_text({"message": "m"}) == "m"
    assert error_text("nope") == ""
