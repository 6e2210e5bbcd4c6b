from __future__ import annotations

from typing import Optional
from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import JSONResponse

from .deps import get_chat_service, get_model_catalog
from .models import (
    SESSION_ID_PATTERN,
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    HistoryResponse,
    ModelCatalogResponse,
    ModelListResponse,
    ModelOption,
    SelectedModelResponse,
    SelectModelRequest,
    TurnModel,
)
from ..application.chat_service import ChatService
from ..application.model_catalog_service import ModelCatalogService

router = APIRouter()


_LISTING_ERRORS = {code: {"model": ErrorResponse} for code in (500, 503)}
_CHAT_ERRORS = {code: {"model": ErrorResponse} for code in (409, 422, 502)}


@router.get("/ollama-models", response_model=ModelListResponse, responses=_LISTING_ERRORS)
def ollama_models(catalog: ModelCatalogService = Depends(get_model_catalog)):
    """Models loaded on the Ollama server, or the listing failure as an error status."""
    listing = catalog.list_models()
    if not listing.ok:
        return JSONResponse(status_code=listing.failure.http_status, content=listing.failure.to_dict())
    return ModelListResponse(models=[ModelOption.from_descriptor(m) for m in listing.models])


@router.get("/models", response_model=ModelCatalogResponse, response_model_exclude_none=True)
def models(
    session_id: Optional[str] = Query(default=None, pattern=SESSION_ID_PATTERN),
    catalog: ModelCatalogService = Depends(get_model_catalog),
) -> ModelCatalogResponse:
    """Models to offer, falling back to the built-in list when listing fails."""
    result = catalog.catalog(session_id)
    return ModelCatalogResponse(
        models=[ModelOption.from_descriptor(m) for m in result.models],
        selected=str(result.selected) if result.selected else None,
        warning=result.warning,
    )


@router.post("/chat", response_model=ChatResponse, responses=_CHAT_ERRORS)
async def chat(
    payload: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    outcome = await chat_service.send(
        payload.message.strip(),
        session_id=payload.session_id,
        model_identifier=payload.model_name,
        history=payload.history(),
    )
    result = outcome.result
    return ChatResponse(
        response=result.response_text,
        updated_chat_history=[TurnModel(**t) for t in result.updated_history.to_list()],
        model=str(result.model_identifier) if result.model_identifier else None,
        session_id=outcome.session_id,
        warnings=outcome.warnings,
    )


@router.get("/sessions/{session_id}/history", response_model=HistoryResponse)
def get_history(
    session_id: str = Path(pattern=SESSION_ID_PATTERN),
    chat_service: ChatService = Depends(get_chat_service),
) -> HistoryResponse:
    history, warnings = chat_service.load_history(session_id)
    return HistoryResponse(
        session_id=session_id,
        chat_history=[TurnModel(**t) for t in history.to_list()],
        warnings=warnings,
    )


@router.delete("/sessions/{session_id}/history", response_model=HistoryResponse)
def clear_history(
    session_id: str = Path(pattern=SESSION_ID_PATTERN),
    chat_service: ChatService = Depends(get_chat_service),
) -> HistoryResponse:
    warnings = chat_service.clear_history(session_id)
    return HistoryResponse(session_id=session_id, chat_history=[], warnings=warnings)


@router.get("/sessions/{session_id}/model", response_model=SelectedModelResponse)
def get_selected_model(
    session_id: str = Path(pattern=SESSION_ID_PATTERN),
    chat_service: ChatService = Depends(get_chat_service),
) -> SelectedModelResponse:
    model = chat_service.get_selected_model(session_id)
    return SelectedModelResponse(session_id=session_id, model=str(model) if model else None)


@router.put("/sessions/{session_id}/model", response_model=SelectedModelResponse)
def select_model(
    payload: SelectModelRequest,
    session_id: str = Path(pattern=SESSION_ID_PATTERN),
    catalog: ModelCatalogService = Depends(get_model_catalog),
) -> SelectedModelResponse:
    warning = catalog.select_model(session_id, payload.model)
    return SelectedModelResponse(
        session_id=session_id,
        model=payload.model.strip(),
        warnings=[warning] if warning else [],
    )
