"""
Configuration settings - Infrastructure component for managing application configuration.
Uses Pydantic for validation and environment variable loading.
"""

from __future__ import annotations
from typing import Optional, List, Dict, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_ENV_CONFIG = SettingsConfigDict(
    env_file='.env',
    env_file_encoding='utf-8',
    case_sensitive=False,
    extra='ignore',
    populate_by_name=True,
)


class OllamaSettings(BaseSettings):
    """Ollama server configuration."""

    model_config = _ENV_CONFIG

    server_address: str = Field('http://localhost:11434', validation_alias='OLLAMA_SERVER_ADDRESS')
    default_model: str = Field('ollama/gemma3:1b', validation_alias='OLLAMA_DEFAULT_MODEL')
    provider_prefix: str = Field('ollama', validation_alias='OLLAMA_PROVIDER_PREFIX')

    # Timeouts
    request_timeout_s: float = Field(600.0, validation_alias='OLLAMA_REQUEST_TIMEOUT_S')
    listing_timeout_s: float = Field(10.0, validation_alias='OLLAMA_LISTING_TIMEOUT_S')

    @field_validator('server_address')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base address so paths can be appended."""
        v = (v or '').strip().rstrip('/')
        return v or 'http://localhost:11434'

    @field_validator('default_model', 'provider_prefix')
    @classmethod
    def strip_value(cls, v: str) -> str:
        v = (v or '').strip()
        if not v:
            raise ValueError('must not be empty')
        return v


class RetrySettings(BaseSettings):
    """Retry configuration for inference calls."""

    model_config = _ENV_CONFIG

    enabled: bool = Field(True, validation_alias='CHAT_RETRY_ENABLED')
    max_retries: int = Field(2, validation_alias='CHAT_MAX_RETRIES')
    backoff_base: float = Field(0.5, validation_alias='CHAT_RETRY_BACKOFF_BASE')
    jitter_max: float = Field(0.1, validation_alias='CHAT_RETRY_JITTER_MAX')

    # Retryable HTTP status codes
    retryable_status_codes: str = Field(
        '500,502,503,504,429,408',
        validation_alias='CHAT_RETRYABLE_STATUS_CODES'
    )

    @field_validator('max_retries')
    @classmethod
    def non_negative(cls, v: int) -> int:
        return max(0, v)

    @property
    def status_codes(self) -> List[int]:
        """Parse comma-separated status codes into list."""
        try:
            return [int(code.strip()) for code in self.retryable_status_codes.split(',') if code.strip()]
        except ValueError:
            return [500, 502, 503, 504, 429, 408]


class ConversationSettings(BaseSettings):
    """Exchange handling configuration."""

    model_config = _ENV_CONFIG

    # None means no caller-side timeout
    exchange_timeout_s: Optional[float] = Field(None, validation_alias='CHAT_EXCHANGE_TIMEOUT_S')

    @field_validator('exchange_timeout_s', mode='before')
    @classmethod
    def blank_is_none(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return v

    @field_validator('exchange_timeout_s')
    @classmethod
    def positive_timeout(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            return None
        return v


class StorageSettings(BaseSettings):
    """Session storage configuration."""

    model_config = _ENV_CONFIG

    backend: str = Field('json', validation_alias='CHAT_STORAGE_BACKEND')
    directory: str = Field('.chat_sessions', validation_alias='CHAT_STORAGE_DIR')

    @field_validator('backend')
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Ensure storage backend is known."""
        v = (v or '').strip().lower()
        if v not in ('json', 'memory'):
            return 'json'
        return v


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = _ENV_CONFIG

    # Sub-configurations
    ollama: OllamaSettings = Field(default_factory=OllamaSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    conversation: ConversationSettings = Field(default_factory=ConversationSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)

    # Logging
    log_level: str = Field('INFO', validation_alias='LOG_LEVEL')
    log_format: str = Field(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        validation_alias='LOG_FORMAT'
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            return 'INFO'
        return v.upper()

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary for serialization."""
        return {
            'ollama': self.ollama.model_dump(),
            'retry': self.retry.model_dump(),
            'conversation': self.conversation.model_dump(),
            'storage': self.storage.model_dump(),
            'log_level': self.log_level,
        }


# Global settings instance
_settings: Optional[AppSettings] = None


def get_settings() -> AppSettings:
    """Get global settings instance (singleton pattern)."""
    global _settings
    if _settings is None:
        _settings = AppSettings()
    return _settings


def reload_settings() -> AppSettings:
    """Reload settings from environment (for testing)."""
    global _settings
    _settings = AppSettings()
    return _settings
