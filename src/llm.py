"""
LLM client for the Anthropic Messages endpoint.

Builds the request payload, makes the blocking call and extracts the first
text block from the response.
"""

import os
import requests
from typing import List, Optional

from dotenv import load_dotenv

from prompts import build_system_prompt

load_dotenv()

API_URL = os.getenv("CLAUDE_API_URL", "https://api.anthropic.com/v1/messages")
MODEL = os.getenv("CLAUDE_MODEL", "claude-sonnet-4-20250514")
MAX_TOKENS = int(os.getenv("CLAUDE_MAX_TOKENS", "1024"))
ANTHROPIC_VERSION = "2023-06-01"

# Request timeout: (connect_timeout, read_timeout) in seconds; no read deadline
REQUEST_TIMEOUT = (10, None)


class RemoteServiceError(Exception):
    """Completion endpoint answered with a non-success status."""

    def __init__(self, status_code: int, body: str, message: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message or f"API error: {status_code} {body}")


class ResponseFormatError(RemoteServiceError):
    """Successful status, but the body has no text content block."""

    def __init__(self, status_code: int, body: str, reason: str):
        super().__init__(status_code, body, f"Unexpected response format: {reason}")


def build_headers(api_key: str) -> dict:
    return {
        "content-type": "application/json",
        "x-api-key": api_key,
        "anthropic-version": ANTHROPIC_VERSION,
    }


def build_payload(messages: List[dict], memory_context: str, model: str = MODEL, max_tokens: int = MAX_TOKENS) -> dict:
    """Request body: model, token budget, system instruction + memory, full history."""
    if not messages:
        raise ValueError("messages must not be empty")
    return {
        "model": model,
        "max_tokens": max_tokens,
        "system": build_system_prompt(memory_context),
        "messages": [{"role": m["role"], "content": m["content"]} for m in messages],
    }


def extract_text(data, status_code: int = 200, body: str = "") -> str:
    """Return the first text field of a Messages response.

    Expected shape: {"content": [{"type": "text", "text": "..."}, ...]}.
    Blocks without a string `text` (e.g. tool_use) are skipped.
    """
    if not isinstance(data, dict):
        raise ResponseFormatError(status_code, body, "body is not a JSON object")
    blocks = data.get("content")
    if not isinstance(blocks, list):
        raise ResponseFormatError(status_code, body, "missing 'content' list")
    for block in blocks:
        if isinstance(block, dict) and isinstance(block.get("text"), str):
            return block["text"]
    raise ResponseFormatError(status_code, body, "no text block in 'content'")


def complete(
    messages: List[dict],
    memory_context: str,
    *,
    api_key: str,
    model: str = MODEL,
    max_tokens: int = MAX_TOKENS,
    api_url: str = API_URL,
) -> str:
    """
    Send the conversation to the completion endpoint and return the raw
    assistant text (directives not yet interpreted).

    Raises RemoteServiceError on a non-200 status; network failures
    propagate as requests.exceptions.RequestException. Never retries.
    """
    payload = build_payload(messages, memory_context, model=model, max_tokens=max_tokens)
    response = requests.post(
        api_url,
        json=payload,
        headers=build_headers(api_key),
        timeout=REQUEST_TIMEOUT,
    )
    if response.status_code != 200:
        raise RemoteServiceError(response.status_code, response.text)

    try:
        data = response.json()
    except ValueError:
        raise ResponseFormatError(response.status_code, response.text, "body is not valid JSON")
    return extract_text(data, response.status_code, response.text)
