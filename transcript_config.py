#!/usr/bin/env python3
"""
Configuration management for transcript retrieval.

Loads settings from environment variables with sensible defaults and
validation. Only applications read the environment; the library classes take
these values as constructor arguments (see TranscriptService.from_config).
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from logging_setup import get_logger

logger = get_logger(__name__)

DEFAULT_REQUEST_DELAY_MS = 500
DEFAULT_HTTP_TIMEOUT = 15
DEFAULT_ACCEPT_LANGUAGE = "en-US"


@dataclass
class TranscriptConfig:
    """Settings shared by the transcript service and the command line."""

    # Pacing and transport
    request_delay_ms: int = DEFAULT_REQUEST_DELAY_MS
    http_timeout: int = DEFAULT_HTTP_TIMEOUT
    accept_language: str = DEFAULT_ACCEPT_LANGUAGE
    http_proxy: Optional[str] = None
    https_proxy: Optional[str] = None

    # Transcript selection and decoding
    default_languages: List[str] = field(default_factory=lambda: ["en"])
    preserve_formatting: bool = False

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    @classmethod
    def from_env(cls) -> 'TranscriptConfig':
        """Load configuration from environment variables with validation."""
        config = cls(
            request_delay_ms=cls._parse_int_env("TRANSCRIPT_REQUEST_DELAY_MS", DEFAULT_REQUEST_DELAY_MS, min_val=0, max_val=60000),
            http_timeout=cls._parse_int_env("TRANSCRIPT_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT, min_val=1, max_val=300),
            accept_language=os.getenv("TRANSCRIPT_ACCEPT_LANGUAGE", DEFAULT_ACCEPT_LANGUAGE).strip() or DEFAULT_ACCEPT_LANGUAGE,
            http_proxy=os.getenv("TRANSCRIPT_HTTP_PROXY") or None,
            https_proxy=os.getenv("TRANSCRIPT_HTTPS_PROXY") or None,
            default_languages=cls._parse_list_env("TRANSCRIPT_LANGUAGES", ["en"]),
            preserve_formatting=cls._parse_bool_env("TRANSCRIPT_PRESERVE_FORMATTING", False),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_json=cls._parse_bool_env("LOG_JSON", True),
        )
        config._validate_config()
        return config

    @staticmethod
    def _parse_bool_env(env_var: str, default: bool) -> bool:
        value = os.getenv(env_var)
        if value is None:
            return default
        return value.strip().lower() in ("1", "true", "yes", "on")

    @staticmethod
    def _parse_int_env(env_var: str, default: int, min_val: Optional[int] = None, max_val: Optional[int] = None) -> int:
        """Parse integer environment variable, clamping to [min_val, max_val]."""
        raw = os.getenv(env_var)
        if raw is None:
            return default
        try:
            value = int(raw)
        except (ValueError, TypeError):
            logger.error(f"Invalid value for {env_var}: {raw!r}, using default {default}")
            return default

        if min_val is not None and value < min_val:
            logger.warning(f"{env_var}={value} is below minimum {min_val}, using {min_val}")
            return min_val
        if max_val is not None and value > max_val:
            logger.warning(f"{env_var}={value} is above maximum {max_val}, using {max_val}")
            return max_val
        return value

    @staticmethod
    def _parse_list_env(env_var: str, default: List[str]) -> List[str]:
        raw = os.getenv(env_var)
        if raw is None:
            return list(default)
        values = [part.strip() for part in raw.split(",") if part.strip()]
        return values or list(default)

    def _validate_config(self) -> None:
        """Log warnings for settings likely to cause trouble upstream."""
        if self.request_delay_ms == 0:
            logger.warning("Configuration warning: TRANSCRIPT_REQUEST_DELAY_MS=0 makes rate limiting by YouTube likely")
        if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            logger.warning(f"Configuration warning: unknown LOG_LEVEL {self.log_level}, using INFO")
            self.log_level = "INFO"

    @property
    def proxies(self) -> Optional[Dict[str, str]]:
        """Proxy mapping in the shape requests expects, or None."""
        proxies = {}
        if self.http_proxy:
            proxies["http"] = self.http_proxy
        if self.https_proxy:
            proxies["https"] = self.https_proxy
        return proxies or None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "request_delay_ms": self.request_delay_ms,
            "http_timeout": self.http_timeout,
            "accept_language": self.accept_language,
            "proxy_enabled": self.proxies is not None,
            "default_languages": list(self.default_languages),
            "preserve_formatting": self.preserve_formatting,
            "log_level": self.log_level,
            "log_json": self.log_json,
        }
