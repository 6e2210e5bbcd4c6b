"""
Ollama retry logic - Infrastructure component for handling request failures.
Implements exponential backoff with jitter around generate calls.
"""

from __future__ import annotations
import logging
import random
import time
from typing import Any, Callable, List, Optional
from dataclasses import dataclass

import ollama
from ollama import Client

from ..config.settings import RetrySettings


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""
    max_retries: int = 2
    base_delay: float = 0.5
    max_delay: float = 30.0
    jitter: float = 0.1
    retryable_status_codes: List[int] = None

    def __post_init__(self):
        if self.retryable_status_codes is None:
            # HTTP 5xx server errors, 408 timeout, 429 rate limit
            self.retryable_status_codes = [500, 502, 503, 504, 429, 408]

    @classmethod
    def from_settings(cls, settings: RetrySettings) -> RetryConfig:
        return cls(
            max_retries=settings.max_retries if settings.enabled else 0,
            base_delay=settings.backoff_base,
            jitter=settings.jitter_max,
            retryable_status_codes=settings.status_codes,
        )


class RetryableOllamaClient:
    """Wrapper for Ollama client with retry logic."""

    def __init__(
        self,
        client: Client,
        config: Optional[RetryConfig] = None,
        logger: Optional[logging.Logger] = None,
        sleep: Callable[[float], None] = time.sleep
    ):
        self._client = client
        self._config = config or RetryConfig()
        self._logger = logger or logging.getLogger(__name__)
        self._sleep = sleep

    def generate(self, **kwargs) -> Any:
        """Execute generate request with retry logic."""
        return self._execute_with_retry(lambda: self._client.generate(**kwargs))

    def _execute_with_retry(self, operation: Callable[[], Any]) -> Any:
        """Execute operation with exponential backoff retry logic."""
        last_exception: Optional[Exception] = None

        for attempt in range(self._config.max_retries + 1):
            try:
                return operation()

            except Exception as e:
                last_exception = e

                if not self._should_retry(e, attempt):
                    if attempt > 0:
                        self._logger.error(f"Final attempt {attempt + 1} failed: {e}")
                    break

                self._logger.debug(f"Attempt {attempt + 1} failed: {e}")

                delay = min(
                    self._config.base_delay * (2 ** attempt),
                    self._config.max_delay
                )
                # Jitter spreads out retries from concurrent sessions
                jitter = random.uniform(0, self._config.jitter * delay)
                total_delay = delay + jitter

                self._logger.debug(f"Retrying in {total_delay:.2f}s...")
                self._sleep(total_delay)

        raise last_exception

    def _should_retry(self, exception: Exception, attempt: int) -> bool:
        """Determine if the exception warrants a retry."""
        if attempt >= self._config.max_retries:
            return False

        code = self._extract_status_code(exception)
        if code is not None:
            return code in self._config.retryable_status_codes

        return isinstance(exception, (ConnectionError, TimeoutError, ollama.RequestError))

    def _extract_status_code(self, exception: Exception) -> Optional[int]:
        """Extract HTTP status code from exception if available."""
        for attr_name in ['status_code', 'code', 'response_code']:
            if hasattr(exception, attr_name):
                try:
                    return int(getattr(exception, attr_name))
                except (ValueError, TypeError):
                    continue

        response = getattr(exception, 'response', None)
        if response is not None and hasattr(response, 'status_code'):
            try:
                return int(response.status_code)
            except (ValueError, TypeError):
                pass

        return None
