"""
Chat Client
Handles: submitting user text to the relay, the loading/typing lifecycle,
failure classification and incremental rendering of replies.

Run `python chat_client.py` for an interactive terminal session.
"""

import asyncio
import logging
import socket
import sys
from typing import Any, Awaitable, Callable, Optional

import httpx

import client_config
from client_config import (
    GREETING,
    RELAY_URL,
    REQUEST_TIMEOUT_SECONDS,
    TYPING_CHUNK_SIZE,
    TYPING_DELAY_SECONDS,
)
from failures import (
    ApplicationError,
    ChatFailure,
    EmptyReply,
    HttpError,
    Offline,
    RequestTimedOut,
    ServiceUnreachable,
    error_text,
    extract_reply,
)
from transcript import TerminalTranscript, Transcript

logger = logging.getLogger(__name__)


async def probe_connectivity() -> bool:
    """True when a TCP connection to a well-known host can be opened."""

    def _connect() -> bool:
        try:
            with socket.create_connection(
                (client_config.CONNECTIVITY_PROBE_HOST, client_config.CONNECTIVITY_PROBE_PORT),
                timeout=client_config.CONNECTIVITY_PROBE_TIMEOUT,
            ):
                return True
        except OSError:
            return False

    return await asyncio.to_thread(_connect)


def _safe_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except (ValueError, RecursionError):
        return None


class ChatClient:
    def __init__(
        self,
        view: Transcript,
        relay_url: str = RELAY_URL,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        typing_delay: float = TYPING_DELAY_SECONDS,
        typing_chunk_size: int = TYPING_CHUNK_SIZE,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        is_online: Callable[[], Awaitable[bool]] = probe_connectivity,
    ):
        self.view = view
        self.relay_url = relay_url
        self.timeout = timeout
        self.typing_delay = typing_delay
        self.typing_chunk_size = max(1, typing_chunk_size)
        self.transport = transport
        self.is_online = is_online

    def start(self) -> None:
        self.view.add_message("ai", GREETING)

    def clear_chat(self) -> None:
        self.view.clear()

    async def submit(self, user_text: str) -> None:
        # Send stays disabled until the in-flight exchange settles.
        if self.view.loading:
            return

        self.view.hide_error_banner()

        text = (user_text or "").strip()
        if not text:
            return

        self.view.add_message("user", text)
        self.view.set_loading(True)
        typing_node = self.view.add_typing_indicator()

        try:
            try:
                data = await self.ask_relay(text)

                # An error in a 2xx body wins over any reply text next to it.
                if isinstance(data, dict) and data.get("error"):
                    raise ApplicationError(str(data["error"]).strip() or None)

                reply = extract_reply(data)
                if not reply:
                    raise EmptyReply()
            finally:
                self.view.remove(typing_node)

            await self._render_reply(reply)
        except ChatFailure as exc:
            logger.warning("Chat request failed: %s", exc.message)
            self._render_failure(exc.message)
        except Exception:
            logger.exception("Unexpected error while submitting message")
            self._render_failure(ChatFailure.default_message)
        finally:
            self.view.set_loading(False)
            self.view.focus_input()

    async def ask_relay(self, text: str) -> Any:
        """POST the message to the relay and return the parsed body.

        Raises a ChatFailure subclass describing why no usable body came back.
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await asyncio.wait_for(
                    client.post(self.relay_url, json={"message": text}),
                    timeout=self.timeout,
                )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            raise RequestTimedOut()
        except httpx.TransportError as exc:
            logger.info("Relay unreachable: %s", exc)
            if not await self.is_online():
                raise Offline()
            raise ServiceUnreachable()

        data = _safe_json(response)
        if not response.is_success:
            raise HttpError(response.status_code, error_text(data))
        return data

    async def _render_reply(self, reply: str) -> None:
        if self.typing_delay <= 0:
            self.view.add_message("ai", reply)
            return

        node = self.view.add_message("ai", "")
        for start in range(0, len(reply), self.typing_chunk_size):
            self.view.append_text(node, reply[start:start + self.typing_chunk_size])
            self.view.scroll_to_bottom()
            await asyncio.sleep(self.typing_delay)
        self.view.finish_message(node)

    def _render_failure(self, message: str) -> None:
        self.view.show_error_banner(message)
        self.view.add_message("ai error", f"Error: {message}")


async def main() -> None:
    view = TerminalTranscript()
    chat = ChatClient(view)
    chat.start()

    while True:
        try:
            line = await asyncio.to_thread(input, "you> ")
        except EOFError:
            break
        command = line.strip().lower()
        if command in ("exit", "quit"):
            break
        if command == "/clear":
            chat.clear_chat()
            continue
        await chat.submit(line)


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    asyncio.run(main())
