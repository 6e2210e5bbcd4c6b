"""Domain interfaces package - Protocols for ports."""

from .inference_backend import InferenceBackend, ModelDirectory
from .session_store import SessionStore

__all__ = [
    "InferenceBackend",
    "ModelDirectory",
    "SessionStore",
]
