"""
Assistant Client
=================
Boundary to the remote text-generation service (Groq).

Every failure is absorbed here: a missing API key, a timeout, a dropped
connection or an HTTP error all come back as the fixed fallback string,
so callers never see an exception from this module.
"""

import base64
import logging
import os
from typing import Optional

from dotenv import load_dotenv
from groq import AsyncGroq

from orbita.config.settings import (
    GROQ_MODEL,
    GROQ_WHISPER_MODEL,
    GROQ_MAX_TOKENS,
    GROQ_TEMPERATURE,
    GROQ_TIMEOUT_SEC,
    ASSISTANT_FALLBACK,
    ASSISTANT_EMPTY_RESPONSE,
)
from orbita.assistant.prompts import SYSTEM_PROMPT, build_prompt
from orbita.schemas import Reading

logger = logging.getLogger(__name__)


def _load_api_key() -> str:
    """Load the Groq API key from the environment or a .env file."""
    load_dotenv()
    key = os.getenv("GROQ_API_KEY", "")
    if key.endswith("_here"):
        return ""
    return key


class AssistantClient:
    """
    Async wrapper around the Groq chat and transcription endpoints.

    Args:
        client: Pre-built AsyncGroq-compatible client (tests pass a stub)
        api_key: Explicit key; read from GROQ_API_KEY when omitted
    """

    def __init__(self, client=None, api_key: Optional[str] = None,
                 model: str = GROQ_MODEL, timeout: float = GROQ_TIMEOUT_SEC):
        self.model = model
        if client is not None:
            self.client = client
        else:
            key = api_key if api_key is not None else _load_api_key()
            self.client = AsyncGroq(api_key=key, timeout=timeout) if key else None

    @property
    def enabled(self) -> bool:
        return self.client is not None

    async def _transcribe(self, audio_base64: str) -> str:
        audio = base64.b64decode(audio_base64)
        result = await self.client.audio.transcriptions.create(
            file=("voice.wav", audio),
            model=GROQ_WHISPER_MODEL,
        )
        return (result.text or "").strip()

    async def analyze(self, reading: Optional[Reading], query: Optional[str] = None,
                      audio_base64: Optional[str] = None) -> str:
        """
        Ask the assistant for a tactical evaluation.

        Args:
            reading: Latest reading or None
            query: Free-text pilot query
            audio_base64: Optional base64 WAV voice command

        Returns:
            Response text, ASSISTANT_FALLBACK on any failure, or
            ASSISTANT_EMPTY_RESPONSE when the model returned nothing
        """
        if not self.enabled:
            logger.warning("No GROQ_API_KEY found; using fallback response")
            return ASSISTANT_FALLBACK

        try:
            if audio_base64:
                transcript = await self._transcribe(audio_base64)
                if transcript:
                    query = f"{query} {transcript}".strip() if query else transcript

            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_prompt(reading, query)},
                ],
                temperature=GROQ_TEMPERATURE,
                max_tokens=GROQ_MAX_TOKENS,
            )
            content = response.choices[0].message.content
        except Exception as e:
            logger.error(f"OTC connectivity breach: {e}")
            return ASSISTANT_FALLBACK

        return content or ASSISTANT_EMPTY_RESPONSE
