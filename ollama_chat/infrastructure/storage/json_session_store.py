"""
JSON session store - File-backed persistence for chat history and model selection.
"""

from __future__ import annotations
import json
import logging
import os
import re
from pathlib import Path
from typing import Optional, Union
from uuid import uuid4

from ...domain.exceptions import StorageError
from ...domain.models.conversation import ConversationHistory, restore_history


_SESSION_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,128}$")

HISTORY_FILE = "history.json"
MODEL_FILE = "selected_model"


class JsonSessionStore:
    """Stores each session under ``<root>/<session_id>/``.

    ``history.json`` holds a JSON array of ``{role, content}``;
    ``selected_model`` holds the identifier as plain text.
    """

    def __init__(self, root: Union[str, Path], logger: Optional[logging.Logger] = None):
        self._root = Path(root).resolve()
        self._logger = logger or logging.getLogger(__name__)

    @property
    def root(self) -> Path:
        return self._root

    def load(self, session_id: str) -> Optional[ConversationHistory]:
        path = self._session_dir(session_id) / HISTORY_FILE
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            history, skipped = restore_history(data)
        except (OSError, ValueError) as e:
            # Unreadable history is discarded so the next save starts clean
            self._remove(path)
            raise StorageError(f"Failed to load chat history for {session_id}: {e}", cause=e)
        if skipped:
            self._logger.warning(f"Dropped {skipped} invalid turn(s) from stored history of {session_id}")
        return history

    def save(self, session_id: str, history: ConversationHistory) -> None:
        payload = json.dumps(history.to_list(), ensure_ascii=False)
        self._write(self._session_dir(session_id) / HISTORY_FILE, payload)

    def clear(self, session_id: str) -> None:
        path = self._session_dir(session_id) / HISTORY_FILE
        try:
            if path.exists():
                path.unlink()
        except OSError as e:
            raise StorageError(f"Failed to clear chat history for {session_id}: {e}", cause=e)

    def load_selected_model(self, session_id: str) -> Optional[str]:
        path = self._session_dir(session_id) / MODEL_FILE
        if not path.exists():
            return None
        try:
            value = path.read_text(encoding="utf-8").strip()
        except OSError as e:
            raise StorageError(f"Failed to load selected model for {session_id}: {e}", cause=e)
        return value or None

    def save_selected_model(self, session_id: str, identifier: str) -> None:
        self._write(self._session_dir(session_id) / MODEL_FILE, str(identifier))

    def _session_dir(self, session_id: str) -> Path:
        if not isinstance(session_id, str) or not _SESSION_ID_RE.match(session_id):
            raise StorageError(f"Invalid session id: {session_id!r}")
        return self._root / session_id

    def _write(self, path: Path, text: str) -> None:
        tmp_path = path.parent / f"{path.name}.{uuid4().hex}.tmp"
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(text, encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as e:
            self._remove(tmp_path)
            raise StorageError(f"Failed to write {path.name}: {e}", cause=e)

    def _remove(self, path: Path) -> None:
        try:
            path.unlink()
        except OSError:
            self._logger.debug(f"Could not remove {path}")
