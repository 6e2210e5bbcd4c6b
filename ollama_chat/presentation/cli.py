"""
CLI presentation layer - Terminal chat on top of the application services.
"""

from __future__ import annotations
import asyncio
import logging
from typing import Callable, Optional

from ..application.chat_service import ChatService
from ..application.model_catalog_service import ModelCatalogService
from ..domain.exceptions import BackendInvocationError, EmptyMessageError, InvalidModelIdentifierError
from ..domain.models.conversation import ModelIdentifier
from ..utils import format_conversation_history


class ChatCLI:
    """Interactive chat for one session."""

    def __init__(
        self,
        chat_service: ChatService,
        model_catalog: ModelCatalogService,
        session_id: str = "cli",
        provider_prefix: str = "ollama",
        quiet: bool = False,
        output: Callable[[str], None] = print,
        logger: Optional[logging.Logger] = None
    ):
        self._chat_service = chat_service
        self._model_catalog = model_catalog
        self._session_id = session_id
        self._provider_prefix = provider_prefix
        self._quiet = quiet
        self._out = output
        self._logger = logger or logging.getLogger(__name__)
        self._model: Optional[ModelIdentifier] = None

    @property
    def model(self) -> Optional[ModelIdentifier]:
        return self._model

    def load_models(self, requested: Optional[str] = None) -> None:
        """Pick the model for this session, warning when the fallback list is in use."""
        catalog = self._model_catalog.catalog(self._session_id)
        if catalog.warning and not self._quiet:
            self._out(f"⚠️ {catalog.warning}")
        if requested:
            self._model = ModelIdentifier(requested)
            self._model_catalog.select_model(self._session_id, self._model)
        else:
            self._model = catalog.selected

    def interactive_mode(self, read: Callable[[str], str] = input) -> None:
        """Run interactive chat mode."""
        if self._model is None:
            self.load_models()
        if not self._quiet:
            self._print_welcome()

        while True:
            try:
                user_input = read("\n👤 You: ").strip()
            except KeyboardInterrupt:
                if not self._quiet:
                    self._out("\n\n⚠️ Use 'quit' or 'exit' to leave the chat")
                continue
            except EOFError:
                break

            if not user_input:
                continue
            if user_input.lower() in ('quit', 'exit'):
                break
            if self._handle_command(user_input):
                continue

            reply = self.send(user_input)
            if reply is not None:
                self._out(f"\n🤖 {self._short_name()}: {reply}")

        if not self._quiet:
            self._out("👋 Goodbye!")

    def send(self, message: str) -> Optional[str]:
        """Run one exchange; failures are reported and leave the history as it was."""
        try:
            outcome = asyncio.run(self._chat_service.send(
                message,
                session_id=self._session_id,
                model_identifier=self._model,
            ))
        except EmptyMessageError:
            return None
        except BackendInvocationError as e:
            self._logger.error(f"Error communicating with model: {e}")
            self._out(
                f"❌ Failed to get response from {self._short_name()}. "
                f"Please check your Ollama setup and ensure the model is available. Error: {e}"
            )
            return None
        for warning in outcome.warnings:
            self._out(f"⚠️ {warning}")
        return outcome.result.response_text

    def _handle_command(self, user_input: str) -> bool:
        command, _, arg = user_input.partition(' ')
        command = command.lower()
        if command in ('clear', '/clear'):
            for warning in self._chat_service.clear_history(self._session_id):
                self._out(f"⚠️ {warning}")
            self._out("✅ History cleared")
            return True
        if command in ('history', '/history'):
            history, warnings = self._chat_service.load_history(self._session_id)
            for warning in warnings:
                self._out(f"⚠️ {warning}")
            self._out("\n📜 Conversation History:")
            self._out(format_conversation_history(history))
            return True
        if command == '/models':
            catalog = self._model_catalog.catalog(self._session_id)
            if catalog.warning:
                self._out(f"⚠️ {catalog.warning}")
            for descriptor in catalog.models:
                marker = '*' if descriptor.identifier == self._model else ' '
                self._out(f" {marker} {descriptor.identifier}  ({descriptor.label})")
            return True
        if command == '/model':
            try:
                self._model = ModelIdentifier(arg)
            except InvalidModelIdentifierError as e:
                self._out(f"❌ {e}")
                return True
            warning = self._model_catalog.select_model(self._session_id, self._model)
            if warning:
                self._out(f"⚠️ {warning}")
            self._out(f"✅ Now chatting with {self._short_name()}")
            return True
        return False

    def _short_name(self) -> str:
        if self._model is None:
            return "selected model"
        return self._model.short_name(self._provider_prefix)

    def _print_welcome(self) -> None:
        self._out("🚀 Ollama Chat - Interactive Mode")
        self._out(f"📝 Model: {self._short_name()}")
        self._out("💡 Commands: 'quit'/'exit' to exit, 'clear' to clear history, 'history' to show history, "
                  "'/models' to list models, '/model <id>' to switch")
        self._out("-" * 60)
