"""Chat Client — configuration from environment / .env."""

import os

from dotenv import load_dotenv

load_dotenv(os.path.join(os.path.dirname(__file__), "..", ".env"))

RELAY_URL = os.getenv("RELAY_URL", "http://localhost:8787/")
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))

# Simulated typing: characters revealed per tick and the pause between ticks.
TYPING_CHUNK_SIZE = int(os.getenv("TYPING_CHUNK_SIZE", "3"))
TYPING_DELAY_SECONDS = float(os.getenv("TYPING_DELAY_SECONDS", "0.02"))

# Checked in order; the first non-empty string wins.
REPLY_FIELDS = ("reply", "response", "text")

CONNECTIVITY_PROBE_HOST = os.getenv("CONNECTIVITY_PROBE_HOST", "1.1.1.1")
CONNECTIVITY_PROBE_PORT = int(os.getenv("CONNECTIVITY_PROBE_PORT", "53"))
CONNECTIVITY_PROBE_TIMEOUT = 1.5

GREETING = "Hi! I'm CyberChat. Ask me anything."
TYPING_PLACEHOLDER = "AI is typing..."
