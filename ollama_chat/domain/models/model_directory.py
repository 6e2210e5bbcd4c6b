"""
Model directory domain models - Results of listing models on the backend.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
from enum import Enum

from .conversation import ModelDescriptor, ModelIdentifier


class ListingFailureKind(Enum):
    """Ways a model listing can fail."""
    UNREACHABLE = "unreachable"
    BACKEND_ERROR = "backend_error"
    MALFORMED_RESPONSE = "malformed_response"


@dataclass(frozen=True)
class ListingFailure:
    """A reported (not raised) listing failure."""
    kind: ListingFailureKind
    message: str
    status_code: Optional[int] = None
    details: Optional[str] = None

    @property
    def http_status(self) -> int:
        """Status the HTTP wrapper answers with for this failure."""
        if self.kind is ListingFailureKind.UNREACHABLE:
            return 503
        if self.kind is ListingFailureKind.BACKEND_ERROR and self.status_code:
            return self.status_code
        return 500

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


@dataclass(frozen=True)
class ModelListing:
    """Either the models reported by the backend or a failure signal."""
    models: List[ModelDescriptor] = field(default_factory=list)
    failure: Optional[ListingFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


DEFAULT_MODELS: List[ModelDescriptor] = [
    ModelDescriptor(identifier=ModelIdentifier("ollama/llama2"), label="Llama 2 (Default Fallback)"),
    ModelDescriptor(identifier=ModelIdentifier("ollama/mistral"), label="Mistral (Default Fallback)"),
]


@dataclass(frozen=True)
class ModelCatalog:
    """Models offered to the user, after fallback policy has been applied."""
    models: List[ModelDescriptor]
    selected: Optional[ModelIdentifier] = None
    warning: Optional[str] = None
    failure_kind: Optional[ListingFailureKind] = None

    @property
    def used_fallback(self) -> bool:
        return self.warning is not None
