from __future__ import annotations

from typing import List, Optional, Literal
from pydantic import BaseModel, Field

from ..domain.models.conversation import ConversationHistory, ModelDescriptor


SESSION_ID_PATTERN = r"^[A-Za-z0-9_-]{1,128}$"


class TurnModel(BaseModel):
    role: Literal['user', 'model']
    content: str


class ChatRequest(BaseModel):
    message: str
    chat_history: Optional[List[TurnModel]] = Field(
        default=None,
        description="History before this message. When omitted with a session_id, the stored history is used.",
    )
    model_name: Optional[str] = Field(
        default=None,
        description="Model identifier such as 'ollama/llama2'. Defaults to the session's selection, then the server default.",
    )
    session_id: Optional[str] = Field(default=None, pattern=SESSION_ID_PATTERN)

    def history(self) -> Optional[ConversationHistory]:
        if self.chat_history is None:
            return None
        return ConversationHistory.from_list(t.model_dump() for t in self.chat_history)


class ChatResponse(BaseModel):
    response: str
    updated_chat_history: List[TurnModel]
    model: Optional[str] = None
    session_id: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)


class ModelOption(BaseModel):
    value: str
    label: str

    @classmethod
    def from_descriptor(cls, descriptor: ModelDescriptor) -> ModelOption:
        return cls(**descriptor.to_option())


class ModelListResponse(BaseModel):
    models: List[ModelOption]


class ModelCatalogResponse(BaseModel):
    models: List[ModelOption]
    selected: Optional[str] = None
    warning: Optional[str] = None


class SelectModelRequest(BaseModel):
    model: str


class SelectedModelResponse(BaseModel):
    session_id: str
    model: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)


class HistoryResponse(BaseModel):
    session_id: str
    chat_history: List[TurnModel]
    warnings: List[str] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
