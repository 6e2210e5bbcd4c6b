"""Ollama infrastructure package."""

from .client import OllamaInferenceBackend
from .model_directory import OllamaModelDirectory
from .retry import RetryableOllamaClient, RetryConfig

__all__ = ['OllamaInferenceBackend', 'OllamaModelDirectory', 'RetryableOllamaClient', 'RetryConfig']
