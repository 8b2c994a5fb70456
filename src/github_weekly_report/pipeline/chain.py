"""Two-step chained model conversation.

The second call never relies on the completion backend remembering the first
one: its system context is the full first exchange, serialized as a message
list, so any backend that accepts an arbitrary system prompt behaves the same.
"""

import json
import logging
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)

# Step-2 responses shorter than this (in characters) are treated as failures
MIN_RESPONSE_LENGTH = 10

DEFAULT_TEMPERATURE = 0.7


class CompletionError(Exception):
    """The completion service failed to produce a response."""

    pass


@dataclass(frozen=True)
class CompletionOptions:
    max_tokens: int
    temperature: float = DEFAULT_TEMPERATURE
    restart: bool = True


class CompletionService(Protocol):
    """A chat completion backend.

    `restart=True` discards any context held for `chat_id`; `restart=False`
    continues it. Callers in this package always pass the full context they
    need, so a stateless backend is a valid implementation.
    """

    async def complete(
        self,
        chat_id: str,
        system_prompt: str,
        user_prompt: str,
        options: CompletionOptions,
    ) -> str: ...


@dataclass(frozen=True)
class ChainResult:
    """Outcome of one chained call: a summary, or a tagged failure."""

    error_tag: str
    summary: str | None = None
    failed_step: int | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.summary is not None

    @classmethod
    def failure(cls, error_tag: str, step: int, reason: str) -> "ChainResult":
        logger.error(
            "%s, step %d generation failed: %s",
            error_tag,
            step,
            reason,
            extra={"error_tag": error_tag, "step": step},
        )
        return cls(error_tag=error_tag, failed_step=step, reason=reason)


def build_transcript(system_prompt: str, user_prompt: str, assistant_response: str) -> str:
    """Serialize the first exchange as the system context of the continuation."""
    return json.dumps(
        [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
            {"role": "assistant", "content": assistant_response},
        ],
        ensure_ascii=False,
    )


async def chain(
    service: CompletionService,
    system_prompt: str,
    user_prompt_1: str,
    chat_id: str,
    max_len_1: int,
    user_prompt_2: str,
    max_len_2: int,
    error_tag: str,
    temperature: float = DEFAULT_TEMPERATURE,
) -> ChainResult:
    """Run an initial completion and a refinement that sees the first exchange.

    Any failure is terminal for this call: nothing is retried and no partial
    summary is returned.
    """
    try:
        response_1 = await service.complete(
            chat_id,
            system_prompt,
            user_prompt_1,
            CompletionOptions(max_tokens=max_len_1, temperature=temperature, restart=True),
        )
    except CompletionError as e:
        return ChainResult.failure(error_tag, 1, f"generation error {e}")

    transcript = build_transcript(system_prompt, user_prompt_1, response_1)
    try:
        response_2 = await service.complete(
            chat_id,
            transcript,
            user_prompt_2,
            CompletionOptions(max_tokens=max_len_2, temperature=temperature, restart=False),
        )
    except CompletionError as e:
        return ChainResult.failure(error_tag, 2, f"generation error {e}")

    if len(response_2) < MIN_RESPONSE_LENGTH:
        return ChainResult.failure(error_tag, 2, f"generation went sideways: {response_2!r}")

    logger.debug("%s, chained generation done (%d chars)", error_tag, len(response_2))
    return ChainResult(error_tag=error_tag, summary=response_2)
