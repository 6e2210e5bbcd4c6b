"""
Conversation orchestrator - Runs one exchange against the inference backend.
Holds no conversation state; every call depends only on its inputs.
"""

from __future__ import annotations
import asyncio
import logging
from typing import Any, Optional, Set, Tuple

from ..exceptions import (
    BackendInvocationError,
    ChatError,
    EmptyMessageError,
    ExchangeInProgressError,
)
from ..interfaces.inference_backend import InferenceBackend
from ..models.conversation import (
    FALLBACK_RESPONSE,
    ConversationHistory,
    ExchangeRequest,
    ExchangeResult,
    ModelIdentifier,
)
from .prompt_renderer import PromptRenderer


class ConversationOrchestrator:
    """Turns (message, history, model) into a reply plus the extended history."""

    def __init__(
        self,
        backend: InferenceBackend,
        default_model: str,
        renderer: Optional[PromptRenderer] = None,
        timeout_s: Optional[float] = None,
        logger: Optional[logging.Logger] = None
    ):
        self._backend = backend
        self._default_model = ModelIdentifier(default_model)
        self._renderer = renderer or PromptRenderer()
        self._timeout_s = timeout_s
        self._logger = logger or logging.getLogger(__name__)
        # Sessions with an exchange currently awaiting the backend
        self._in_flight: Set[str] = set()

    @property
    def default_model(self) -> ModelIdentifier:
        return self._default_model

    def resolve_model(self, model_identifier: Optional[str]) -> ModelIdentifier:
        """Use the requested identifier, or the process-wide default."""
        if model_identifier is None or (isinstance(model_identifier, str) and not model_identifier.strip()):
            return self._default_model
        return ModelIdentifier(model_identifier)

    def is_busy(self, session_id: str) -> bool:
        return session_id in self._in_flight

    async def converse(
        self,
        message: str,
        history: Optional[ConversationHistory] = None,
        model_identifier: Optional[str] = None,
        session_id: Optional[str] = None
    ) -> ExchangeResult:
        """Run one exchange.

        Raises EmptyMessageError for blank input, ExchangeInProgressError when
        ``session_id`` already has a pending exchange, and
        BackendInvocationError when the backend call fails. Empty or invalid
        backend output is not an error: the fixed fallback reply is used.
        """
        if not isinstance(message, str) or not message.strip():
            raise EmptyMessageError()
        history = history if history is not None else ConversationHistory()
        model = self.resolve_model(model_identifier)

        if session_id is not None:
            if session_id in self._in_flight:
                raise ExchangeInProgressError(session_id)
            self._in_flight.add(session_id)
        try:
            prompt = self._renderer.render(message, history)
            raw_output = await self._invoke(prompt, model)
        finally:
            if session_id is not None:
                self._in_flight.discard(session_id)

        response_text, used_fallback = self.normalize_output(raw_output)
        return ExchangeResult(
            response_text=response_text,
            updated_history=history.append_exchange(message, response_text),
            model_identifier=model,
            used_fallback=used_fallback,
        )

    async def run(self, request: ExchangeRequest, session_id: Optional[str] = None) -> ExchangeResult:
        """Same as ``converse`` for a prepared ExchangeRequest."""
        return await self.converse(
            request.message,
            request.history,
            request.model_identifier,
            session_id=session_id,
        )

    async def _invoke(self, prompt: str, model: ModelIdentifier) -> Any:
        call = asyncio.to_thread(self._backend.generate, prompt, str(model))
        try:
            if self._timeout_s is not None:
                return await asyncio.wait_for(call, timeout=self._timeout_s)
            return await call
        except asyncio.TimeoutError as e:
            # The worker thread may still finish; its result is dropped.
            self._logger.error(f"Backend call for {model} timed out after {self._timeout_s}s")
            raise BackendInvocationError(
                f"Model {model} did not respond within {self._timeout_s}s",
                cause=e,
                model=str(model),
            ) from e
        except ChatError:
            raise
        except Exception as e:
            self._logger.error(f"Backend call for {model} failed: {e}")
            raise BackendInvocationError(
                f"Failed to get response from {model}: {e}",
                cause=e,
                status_code=getattr(e, "status_code", None),
                model=str(model),
            ) from e

    def normalize_output(self, raw_output: Any) -> Tuple[str, bool]:
        """Return (response_text, used_fallback) for raw backend output."""
        if isinstance(raw_output, str) and raw_output.strip():
            return raw_output.strip(), False
        if isinstance(raw_output, str):
            self._logger.warning("Model output was an empty string")
        else:
            self._logger.warning(
                f"Model output was null or invalid. Type: {type(raw_output).__name__}"
            )
        return FALLBACK_RESPONSE, True
