"""Answer and session-title generation over the text-completion capability."""

from __future__ import annotations

import asyncio
import re

from audit_rag.exceptions import AuditRAGError, CapabilityTimeout, CompletionUnavailable
from audit_rag.generation.prompt_templates import ANSWER_GENERATION_PROMPT, SESSION_TITLE_PROMPT
from audit_rag.models.domain import RecognizedIntent
from audit_rag.observability.logger import get_logger
from audit_rag.protocols.llm import TextCompletion

logger = get_logger("generation")

DEFAULT_SESSION_TITLE = "New Chat"
TITLE_MAX_CHARS = 60
TITLE_MAX_WORDS = 6


def clean_title(raw: str) -> str:
    title = raw.strip()
    title = re.sub(r"^[\"']|[\"']$", "", title)
    title = re.sub(r"\.$", "", title).strip()
    words = title.split()
    if len(words) > TITLE_MAX_WORDS:
        title = " ".join(words[:TITLE_MAX_WORDS])
    if len(title) > TITLE_MAX_CHARS:
        title = title[: TITLE_MAX_CHARS - 3] + "..."
    return title or DEFAULT_SESSION_TITLE


class AnswerGenerator:
    def __init__(self, completion: TextCompletion, timeout_s: float = 30.0) -> None:
        self._completion = completion
        self._timeout_s = timeout_s

    def is_available(self) -> bool:
        return self._completion.is_available()

    async def generate(
        self,
        intent: RecognizedIntent,
        context: str,
        session_id: str | None = None,
        history: list[dict] | None = None,
    ) -> str:
        """Raises CompletionError or CapabilityTimeout; the caller decides how to degrade."""
        if not self._completion.is_available():
            raise CompletionUnavailable("Text completion is not configured")

        prompt = ANSWER_GENERATION_PROMPT.format(
            question=intent.original_query, intent=intent.intent, context=context
        )
        try:
            answer = await asyncio.wait_for(
                self._completion.complete(prompt, session_id=session_id, history=history),
                timeout=self._timeout_s,
            )
        except asyncio.TimeoutError as e:
            raise CapabilityTimeout(f"Answer generation exceeded {self._timeout_s}s") from e

        logger.info(
            "generated_answer",
            intent=intent.intent,
            prompt_len=len(prompt),
            answer_len=len(answer),
            session_id=session_id,
        )
        return answer

    async def generate_session_title(self, first_message: str) -> str:
        if not self._completion.is_available():
            return DEFAULT_SESSION_TITLE

        try:
            raw = await asyncio.wait_for(
                self._completion.complete(SESSION_TITLE_PROMPT.format(message=first_message)),
                timeout=self._timeout_s,
            )
        except (AuditRAGError, asyncio.TimeoutError) as e:
            logger.warning("session_title_failed", error=str(e))
            return DEFAULT_SESSION_TITLE

        return clean_title(raw)
