from __future__ import annotations

from fastapi import Request

from ..application.chat_service import ChatService
from ..application.model_catalog_service import ModelCatalogService
from ..bootstrap import ServiceContainer


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_chat_service(request: Request) -> ChatService:
    return get_container(request).chat_service


def get_model_catalog(request: Request) -> ModelCatalogService:
    return get_container(request).model_catalog
