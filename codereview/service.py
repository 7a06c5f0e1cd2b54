"""
Resilient completion caller: validate, call upstream, retry with exponential backoff.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from codereview import constants
from codereview.config import Settings
from codereview.errors import (
    ConfigurationError,
    ExhaustedRetries,
    InvalidInput,
    TransientUpstreamFailure,
)
from codereview.upstream import Upstream


@dataclass(frozen=True)
class RetryPolicy:
    retry_attempts: int = constants.RETRY_ATTEMPTS
    initial_delay_ms: float = constants.INITIAL_DELAY_MS
    backoff_factor: float = constants.BACKOFF_FACTOR
    attempt_timeout_s: Optional[float] = None

    def __post_init__(self):
        if self.retry_attempts < 0:
            raise ValueError("retry_attempts must be >= 0")
        if self.initial_delay_ms < 0:
            raise ValueError("initial_delay_ms must be >= 0")
        if self.backoff_factor < 1:
            raise ValueError("backoff_factor must be >= 1")
        if self.attempt_timeout_s is not None and self.attempt_timeout_s <= 0:
            raise ValueError("attempt_timeout_s must be positive")

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryPolicy":
        try:
            return cls(
                retry_attempts=settings.RETRY_ATTEMPTS,
                initial_delay_ms=settings.INITIAL_DELAY_MS,
                backoff_factor=settings.BACKOFF_FACTOR,
                attempt_timeout_s=settings.ATTEMPT_TIMEOUT_S,
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid retry settings: {e}") from e


def validate_prompt(prompt: Any) -> str:
    """Return the prompt unchanged, or raise InvalidInput if it is not a non-blank string."""
    if not isinstance(prompt, str) or not prompt.strip():
        raise InvalidInput("Invalid input: Prompt must be a non-empty string")
    return prompt


class CompletionService:
    """
    Wraps a single "ask the model" operation with input validation and
    bounded exponential-backoff retry.

    Each call to complete() owns its retry counters; the upstream handle is
    the only thing shared between concurrent calls.
    """

    def __init__(
        self,
        upstream: Upstream,
        policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.upstream = upstream
        self.policy = policy or RetryPolicy()
        self._sleep = sleep

    async def _attempt(self, prompt: str, timeout_s: Optional[float]) -> str:
        call = self.upstream.generate(prompt)
        if timeout_s is None:
            response = await call
        else:
            try:
                response = await asyncio.wait_for(call, timeout=timeout_s)
            except asyncio.TimeoutError as e:
                raise TransientUpstreamFailure(
                    f"Upstream call timed out after {timeout_s}s"
                ) from e

        return self.upstream.extract_text(response)

    async def complete(self, prompt: str, policy: Optional[RetryPolicy] = None) -> str:
        """
        Generate a completion for a prompt.

        Args:
            prompt: Non-empty text to send upstream.
            policy: Optional retry policy overriding the service default for this call.

        Returns:
            The extracted, trimmed completion text. Never empty.

        Raises:
            InvalidInput: If the prompt is not a non-blank string. No upstream call is made.
            ExhaustedRetries: If every attempt failed.
        """
        validate_prompt(prompt)
        policy = policy or self.policy

        retries_left = policy.retry_attempts
        delay_ms = policy.initial_delay_ms
        attempts = 0

        while True:
            attempts += 1
            try:
                return await self._attempt(prompt, policy.attempt_timeout_s)
            except (InvalidInput, ConfigurationError):
                raise
            except Exception as e:
                if retries_left <= 0:
                    logging.error(f"AI Service failed after {attempts} attempts: {e}")
                    raise ExhaustedRetries(attempts, e) from e

                logging.warning(
                    f"AI Service transient error: {e}. "
                    f"Retries remaining: {retries_left}. Next attempt in {delay_ms:g}ms"
                )
                await self._sleep(delay_ms / 1000)
                delay_ms *= policy.backoff_factor
                retries_left -= 1
