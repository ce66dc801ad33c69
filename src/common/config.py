"""
Configuration module for the message classification service.

This module centralizes the loading and validation of all configuration
parameters from environment variables. It provides a single `Settings`
class that acts as a container for all configurable values. The worker and
the starter each build one instance at process start and pass it to every
collaborator that needs it.
"""

import os
from typing import Literal

SUPPORTED_PROVIDERS = ("openai", "lmstudio")


class Settings:
    """
    A container for all configuration settings, loaded from environment variables.

    This class centralizes configuration, providing default values for optional
    settings and raising errors for malformed values.
    """

    # --- LLM Provider Configuration ---
    LLM_PROVIDER: Literal["openai", "lmstudio"]
    DEFAULT_MODEL: str
    OPENAI_API_KEY: str | None
    OPENAI_BASE_URL: str | None
    LMSTUDIO_BASE_URL: str | None
    LMSTUDIO_API_KEY: str

    # --- Generation ---
    LLM_TEMPERATURE: float
    LLM_MAX_TOKENS: int
    REQUEST_TIMEOUT: int

    # --- Temporal ---
    TEMPORAL_ADDRESS: str
    TEMPORAL_NAMESPACE: str
    TEMPORAL_TLS: bool
    TEMPORAL_API_KEY: str | None
    TASK_QUEUE: str

    # --- Logging ---
    LOG_FORMAT: Literal["console", "json"]
    LOG_LEVEL: str

    def __init__(self):
        """
        Loads settings from environment variables and performs validation.
        """
        # --- LLM Provider Configuration ---
        self.LLM_PROVIDER = os.getenv("LLM_PROVIDER", "openai").strip().lower()
        if self.LLM_PROVIDER not in SUPPORTED_PROVIDERS:
            raise ValueError("LLM_PROVIDER must be 'openai' or 'lmstudio'")

        self.DEFAULT_MODEL = os.getenv("DEFAULT_MODEL", "gpt-4o-mini").strip()
        if not self.DEFAULT_MODEL:
            raise ValueError("DEFAULT_MODEL must not be empty")

        self.OPENAI_API_KEY = self._get_optional_env("OPENAI_API_KEY")
        self.OPENAI_BASE_URL = self._get_optional_env("OPENAI_BASE_URL")
        self.LMSTUDIO_BASE_URL = self._get_optional_env("LMSTUDIO_BASE_URL")
        self.LMSTUDIO_API_KEY = self._get_optional_env("LMSTUDIO_API_KEY") or "not-needed"

        # --- Generation ---
        self.LLM_TEMPERATURE = self._get_float_env("LLM_TEMPERATURE", 0.1)
        self.LLM_MAX_TOKENS = self._get_int_env("LLM_MAX_TOKENS", 300)
        self.REQUEST_TIMEOUT = self._get_int_env("REQUEST_TIMEOUT", 60)
        if not 0.0 <= self.LLM_TEMPERATURE <= 2.0:
            raise ValueError("LLM_TEMPERATURE must be between 0 and 2")
        if self.LLM_MAX_TOKENS < 1:
            raise ValueError("LLM_MAX_TOKENS must be >= 1")
        if self.REQUEST_TIMEOUT < 1:
            raise ValueError("REQUEST_TIMEOUT must be >= 1")

        # --- Temporal ---
        self.TEMPORAL_ADDRESS = os.getenv("TEMPORAL_ADDRESS", "localhost:7233").strip()
        self.TEMPORAL_NAMESPACE = os.getenv("TEMPORAL_NAMESPACE", "default").strip()
        self.TEMPORAL_TLS = self._get_bool_env("TEMPORAL_TLS", False)
        self.TEMPORAL_API_KEY = self._get_optional_env("TEMPORAL_API_KEY")
        self.TASK_QUEUE = os.getenv(
            "TEMPORAL_TASK_QUEUE", "message-classification"
        ).strip()
        if not self.TASK_QUEUE:
            raise ValueError("TEMPORAL_TASK_QUEUE must not be empty")

        # --- Logging ---
        self.LOG_FORMAT = os.getenv("LOG_FORMAT", "console").strip().lower()
        if self.LOG_FORMAT not in ("console", "json"):
            raise ValueError("LOG_FORMAT must be 'console' or 'json'")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()

    def _get_optional_env(self, var_name: str) -> str | None:
        """Return a stripped environment variable, or None when unset or blank."""
        value = os.getenv(var_name)
        if value is None or not value.strip():
            return None
        return value.strip()

    def _get_int_env(self, var_name: str, default: int) -> int:
        value = os.getenv(var_name)
        if value is None or not value.strip():
            return default
        try:
            return int(value)
        except ValueError:
            raise ValueError(f"{var_name} must be an integer, got '{value}'") from None

    def _get_float_env(self, var_name: str, default: float) -> float:
        value = os.getenv(var_name)
        if value is None or not value.strip():
            return default
        try:
            return float(value)
        except ValueError:
            raise ValueError(f"{var_name} must be a number, got '{value}'") from None

    def _get_bool_env(self, var_name: str, default: bool) -> bool:
        value = os.getenv(var_name)
        if value is None or not value.strip():
            return default
        normalized = value.strip().lower()
        if normalized in ("1", "true", "yes", "on"):
            return True
        if normalized in ("0", "false", "no", "off"):
            return False
        raise ValueError(f"{var_name} must be a boolean, got '{value}'")
