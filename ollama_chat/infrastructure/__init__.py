"""Infrastructure layer - Adapters for Ollama, storage and configuration."""
