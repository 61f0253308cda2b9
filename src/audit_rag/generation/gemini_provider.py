"""Google Gemini text completion using the google-genai SDK."""

from __future__ import annotations

from google import genai
from google.genai import types

from audit_rag.exceptions import CompletionError, CompletionUnavailable
from audit_rag.generation.session_cache import ChatSessionCache
from audit_rag.observability.logger import get_logger

logger = get_logger("gemini")


def seed_history(history: list[dict]) -> list[types.Content]:
    """Convert chat turns to Gemini contents, skipping leading assistant turns."""
    first_user = next((i for i, turn in enumerate(history) if turn.get("role") == "user"), None)
    if first_user is None:
        return []
    if first_user > 0:
        logger.info("history_trimmed", skipped=first_user)

    return [
        types.Content(
            role="user" if turn.get("role") == "user" else "model",
            parts=[types.Part(text=str(turn.get("content", "")))],
        )
        for turn in history[first_user:]
    ]


class GeminiCompletion:
    def __init__(
        self,
        api_key: str = "",
        model: str = "gemini-2.5-flash",
        temperature: float = 0.1,
        max_tokens: int = 4096,
        sessions: ChatSessionCache | None = None,
    ) -> None:
        self._client = genai.Client(api_key=api_key) if api_key else None
        self._model = model
        self._config = types.GenerateContentConfig(
            temperature=temperature,
            max_output_tokens=max_tokens,
        )
        self.sessions = sessions or ChatSessionCache()

    def is_available(self) -> bool:
        return self._client is not None

    async def complete(
        self,
        prompt: str,
        session_id: str | None = None,
        history: list[dict] | None = None,
    ) -> str:
        if self._client is None:
            raise CompletionUnavailable("Gemini API key is not configured")

        try:
            if session_id and history:
                chat = await self.sessions.get_or_create(
                    session_id, lambda: self._create_chat(history)
                )
                response = await chat.send_message(prompt)
            else:
                response = await self._client.aio.models.generate_content(
                    model=self._model,
                    contents=prompt,
                    config=self._config,
                )
            return response.text or ""
        except Exception as e:
            raise CompletionError(f"Gemini completion failed: {e}") from e

    async def _create_chat(self, history: list[dict]):
        contents = seed_history(history)
        logger.info("chat_created", history_turns=len(contents))
        return self._client.aio.chats.create(
            model=self._model,
            config=self._config,
            history=contents,
        )
