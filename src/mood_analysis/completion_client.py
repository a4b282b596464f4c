"""
Chat Completion Client.

Sends structured mood summaries to an OpenAI-compatible
``/chat/completions`` endpoint (Cerebras by default) and returns the
generated text. Every failure is reported as ExternalGeneratorUnavailable;
callers decide how to fall back. Requests are made exactly once.
"""

import os
import json
import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.cerebras.ai/v1/chat/completions"
DEFAULT_MODEL = "llama3.1-8b"


class ExternalGeneratorUnavailable(RuntimeError):
    """The text generator could not produce a usable response."""


class ChatCompletionClient:
    """
    Minimal async client for chat completion APIs.

    Instances are callable with a structured summary, so a client can be
    passed directly wherever the engine expects a summary generator.
    """

    ANALYSIS_SYSTEM_PROMPT = (
        "You are a mental health pattern analyzer. Provide empathetic, "
        "non-diagnostic insights about mood patterns based on the data provided. "
        "Never make medical diagnoses. Always encourage professional help when "
        "patterns suggest potential concerns."
    )

    INSIGHT_SYSTEM_PROMPT = (
        "You are a supportive mental health companion. "
        "Provide brief, encouraging insights."
    )

    ANALYSIS_PROMPT = """Analyze this mood tracking data and provide a supportive, non-diagnostic summary:

{summary}

Please provide:
1. Overview of mood patterns (stability, fluctuations)
2. Sleep patterns and their relationship to mood
3. Energy level trends
4. Any detected patterns (potential hypomanic or depressive episodes)
5. Gentle recommendations for self-care

Remember: This is for awareness only, not diagnosis. Always recommend consulting healthcare providers."""

    INSIGHT_PROMPT = """Based on today's mood entry and recent history, provide a brief, encouraging insight:

Today: Mood {mood}/5, Energy: {energy}, Sleep: {sleep}h

Previous {previous_days} days average mood: {previous_average_mood}

Provide a short, supportive message (1-2 sentences) focusing on self-awareness and encouragement."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: float = 30.0,
        temperature: float = 0.7,
        max_tokens: int = 500,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: Bearer token (default from CEREBRAS_API_KEY)
            model: Model identifier (default from CEREBRAS_MODEL)
            api_url: Full URL of the chat completions endpoint
            timeout: Request timeout in seconds
            temperature: Sampling temperature
            max_tokens: Token limit for analysis summaries
            transport: Optional httpx transport, used by tests
        """
        self.api_key = api_key or os.getenv("CEREBRAS_API_KEY")
        self.model = model or os.getenv("CEREBRAS_MODEL", DEFAULT_MODEL)
        self.api_url = api_url or DEFAULT_API_URL
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._transport = transport

        if not self.api_key:
            logger.warning("[NARRATIVE] No API key configured; external summaries will fall back")

    async def __call__(self, structured_summary: Dict[str, Any]) -> str:
        return await self.summarize(structured_summary)

    async def summarize(self, structured_summary: Dict[str, Any]) -> str:
        """Generate a narrative summary for a structured mood summary."""
        prompt = self.ANALYSIS_PROMPT.format(summary=json.dumps(structured_summary, indent=2))
        return await self.complete(self.ANALYSIS_SYSTEM_PROMPT, prompt)

    async def daily_insight(self, context: Dict[str, Any]) -> str:
        """Generate a one or two sentence insight for today's entry."""
        prompt = self.INSIGHT_PROMPT.format(
            mood=context["today"]["mood"],
            energy=context["today"]["energy"],
            sleep=context["today"]["sleep"],
            previous_days=context["previous_days"],
            previous_average_mood=context["previous_average_mood"],
        )
        return await self.complete(self.INSIGHT_SYSTEM_PROMPT, prompt, max_tokens=100)

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: Optional[int] = None,
    ) -> str:
        """
        Send one chat completion request.

        Returns:
            The generated message content

        Raises:
            ExternalGeneratorUnavailable: on missing credentials, transport
                errors, non-200 responses or malformed payloads
        """
        if not self.api_key:
            raise ExternalGeneratorUnavailable("API key not configured")

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self.temperature,
            "max_tokens": max_tokens or self.max_tokens,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout), transport=self._transport
            ) as client:
                response = await client.post(self.api_url, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            raise ExternalGeneratorUnavailable(f"Request timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise ExternalGeneratorUnavailable(f"Request failed: {e}") from e

        if response.status_code != 200:
            raise ExternalGeneratorUnavailable(
                f"API returned status {response.status_code}: {_error_message(response)}"
            )

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ExternalGeneratorUnavailable(f"Malformed response: {e!r}") from e

        if not isinstance(content, str) or not content.strip():
            raise ExternalGeneratorUnavailable("Empty response content")

        usage = data.get("usage") or {}
        logger.info(
            f"[NARRATIVE] Completion received from {self.model} "
            f"({usage.get('total_tokens', '?')} tokens)"
        )
        return content.strip()


def _error_message(response: httpx.Response) -> str:
    """Best-effort extraction of an API error message."""
    try:
        return response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return response.text[:200]
