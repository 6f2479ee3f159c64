"""
GrindProof Chat Service - Configuration Module

This module handles application configuration via environment variables.
"""

import os
from typing import Optional


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "GrindProof Chat Service"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8001"))

    # Task service (system of record for tasks)
    TASK_SERVICE_URL: str = os.getenv("TASK_SERVICE_URL", "http://core-api:8000")
    TASK_SERVICE_TIMEOUT: float = float(os.getenv("TASK_SERVICE_TIMEOUT", "10.0"))

    # AI/LLM Configuration
    OPENAI_API_KEY: Optional[str] = os.getenv("OPENAI_API_KEY", None)
    MODEL_NAME: str = os.getenv("MODEL_NAME", "gpt-4o-mini")
    USE_LLM: bool = os.getenv("USE_LLM", "false").lower() == "true"
    LLM_TIMEOUT: float = float(os.getenv("LLM_TIMEOUT", "10.0"))
    LLM_TEMPERATURE: float = float(os.getenv("LLM_TEMPERATURE", "0.7"))
    LLM_MAX_TOKENS: int = int(os.getenv("LLM_MAX_TOKENS", "1000"))

    # Signed dialogue-state token
    STATE_TOKEN_SECRET: str = os.getenv("STATE_TOKEN_SECRET", "dev-state-secret-change-in-production")
    STATE_TOKEN_ALGORITHM: str = os.getenv("STATE_TOKEN_ALGORITHM", "HS256")
    STATE_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("STATE_TOKEN_EXPIRE_MINUTES", "30"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
