"""Rendering surfaces for the chat client.

`Transcript` keeps the conversation in memory (what a page would show);
`TerminalTranscript` additionally echoes it to a text stream.
"""

import sys
from dataclasses import dataclass
from typing import List, Optional, TextIO

from client_config import TYPING_PLACEHOLDER


@dataclass
class Message:
    role: str
    text: str

    @property
    def is_typing(self) -> bool:
        return "typing" in self.role.split()


class Transcript:
    def __init__(self):
        self.messages: List[Message] = []
        self.banner: Optional[str] = None
        self.loading = False
        self.input_focused = True
        self.scroll_count = 0

    def add_message(self, role: str, text: str) -> Message:
        message = Message(role=role, text=text)
        self.messages.append(message)
        self.scroll_to_bottom()
        return message

    def add_typing_indicator(self) -> Message:
        return self.add_message("ai typing", TYPING_PLACEHOLDER)

    def remove(self, message: Message) -> None:
        self.messages = [m for m in self.messages if m is not message]

    def append_text(self, message: Message, chunk: str) -> None:
        message.text += chunk

    def scroll_to_bottom(self) -> None:
        self.scroll_count += 1

    def finish_message(self, message: Message) -> None:
        """Called once a progressively rendered message is complete."""

    def set_loading(self, is_loading: bool) -> None:
        self.loading = is_loading
        if is_loading:
            self.input_focused = False

    def focus_input(self) -> None:
        self.input_focused = True

    def show_error_banner(self, text: str) -> None:
        self.banner = text

    def hide_error_banner(self) -> None:
        self.banner = None

    def clear(self) -> None:
        self.messages = []
        self.hide_error_banner()


class TerminalTranscript(Transcript):
    LABELS = {"user": "you", "ai": "ai", "ai error": "ai!"}

    def __init__(self, stream: TextIO = sys.stdout):
        super().__init__()
        self.stream = stream

    def add_message(self, role, text):
        message = super().add_message(role, text)
        if message.is_typing:
            self.stream.write(f"{text}\r")
        elif role != "user":
            self.stream.write(f"{self.LABELS.get(role, role)}> {text}")
            if text:
                self.stream.write("\n")
        self.stream.flush()
        return message

    def remove(self, message):
        super().remove(message)
        if message.is_typing:
            self.stream.write(" " * len(message.text) + "\r")
            self.stream.flush()

    def append_text(self, message, chunk):
        super().append_text(message, chunk)
        self.stream.write(chunk)
        self.stream.flush()

    def finish_message(self, message: Message) -> None:
        self.stream.write("\n")
        self.stream.flush()

    def clear(self):
        super().clear()
        self.stream.write("-- chat cleared --\n")
        self.stream.flush()
