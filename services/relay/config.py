"""Relay Service — configuration from environment / .env."""

import os

from dotenv import load_dotenv

load_dotenv(os.path.join(os.path.dirname(__file__), "..", ".env"))

# Empty rather than required so a missing token surfaces as a 500, not an import error.
HF_TOKEN = os.getenv("HF_TOKEN", "")
HF_API_URL = os.getenv(
    "HF_API_URL",
    "https://api-inference.huggingface.co/models/mistralai/Mistral-7B-Instruct",
)
HF_MAX_NEW_TOKENS = int(os.getenv("HF_MAX_NEW_TOKENS", "250"))
HF_TEMPERATURE = float(os.getenv("HF_TEMPERATURE", "0.7"))

RELAY_PORT = int(os.getenv("RELAY_PORT", "8787"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}
