"""Configuration service for managing application settings."""

import json
from dataclasses import replace
from pathlib import Path
from typing import Any

import structlog

from ..models import AppConfig, GameBiz
from .filesystem import FileSystemService

log = structlog.stdlib.get_logger()

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ValidationResult:
    """Result of configuration validation."""

    def __init__(self, is_valid: bool, errors: list[str] | None = None) -> None:
        self.is_valid: bool = is_valid
        self.errors: list[str] = errors or []


class ConfigurationService:
    """Service for loading, validating and saving application configuration."""

    def __init__(
        self,
        config_path: Path | None = None,
        filesystem: FileSystemService | None = None,
    ) -> None:
        self.config_path: Path = config_path or Path.home() / ".config" / "gameres" / "config.json"
        self._filesystem = filesystem or FileSystemService()
        log.debug("Configuration service initialized", config_path=str(self.config_path))

    def load_config(self) -> AppConfig:
        """Load configuration from file or return default configuration."""
        if not self.config_path.exists():
            log.info("Configuration file not found, using defaults")
            return AppConfig()

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data: dict[str, Any] = json.load(f)

            config = self._dict_to_config(data)
            validation_result = self.validate_config(config)

            if not validation_result.is_valid:
                log.warning("Invalid configuration loaded, using defaults", errors=validation_result.errors)
                return AppConfig()

            log.info("Configuration loaded successfully")
            return config

        except (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
            log.error("Failed to load configuration, using defaults", error=str(e))
            return AppConfig()

    def save_config(self, config: AppConfig) -> None:
        """Save configuration to file.

        Raises:
            ValueError: If the configuration is invalid
            OSError: If the file cannot be written
        """
        validation_result = self.validate_config(config)
        if not validation_result.is_valid:
            raise ValueError(f"Invalid configuration: {', '.join(validation_result.errors)}")

        content = json.dumps(self._config_to_dict(config), indent=2, ensure_ascii=False)
        try:
            self._filesystem.write_text_atomic(self.config_path, content)
        except OSError as e:
            log.error("Failed to save configuration", error=str(e))
            raise

        log.info("Configuration saved successfully")

    def validate_config(self, config: AppConfig) -> ValidationResult:
        """Validate configuration settings."""
        errors = []

        if config.log_level not in VALID_LOG_LEVELS:
            errors.append(f"log_level must be one of: {', '.join(sorted(VALID_LOG_LEVELS))}")

        if not isinstance(config.request_timeout, (int, float)) or config.request_timeout <= 0:
            errors.append("request_timeout must be a positive number")
        elif config.request_timeout > 300:
            errors.append("request_timeout should not exceed 300 seconds")

        if not isinstance(config.cache_ttl, (int, float)) or config.cache_ttl < 0:
            errors.append("cache_ttl must be a non-negative number")

        known_biz = {biz.value for biz in GameBiz}
        for biz, path in config.install_paths.items():
            if biz not in known_biz:
                errors.append(f"install_paths contains unknown game: {biz}")
            elif not path or not Path(path).is_absolute():
                errors.append(f"install path for {biz} must be an absolute path")

        return ValidationResult(len(errors) == 0, errors)

    def get_install_path(self, config: AppConfig, biz: GameBiz) -> Path | None:
        path = config.install_paths.get(biz.value)
        return Path(path) if path else None

    def with_install_path(self, config: AppConfig, biz: GameBiz, path: Path | None) -> AppConfig:
        """Copy of ``config`` with the install path of ``biz`` set or cleared."""
        install_paths = dict(config.install_paths)
        if path is None:
            install_paths.pop(biz.value, None)
        else:
            install_paths[biz.value] = str(path)
        return replace(config, install_paths=install_paths)

    def _config_to_dict(self, config: AppConfig) -> dict[str, Any]:
        """Convert AppConfig to dictionary for JSON serialization."""
        return {
            "log_level": config.log_level,
            "request_timeout": config.request_timeout,
            "cache_ttl": config.cache_ttl,
            "verify_ssl": config.verify_ssl,
            "install_paths": dict(config.install_paths),
        }

    def _dict_to_config(self, data: dict[str, Any]) -> AppConfig:
        """Convert dictionary to AppConfig, falling back to defaults per field."""
        defaults = AppConfig()

        timeout_raw = data.get("request_timeout", defaults.request_timeout)
        ttl_raw = data.get("cache_ttl", defaults.cache_ttl)
        verify_raw = data.get("verify_ssl", defaults.verify_ssl)
        paths_raw = data.get("install_paths") or {}

        return AppConfig(
            log_level=str(data.get("log_level", defaults.log_level)).upper(),
            request_timeout=float(timeout_raw) if isinstance(timeout_raw, (int, float)) else defaults.request_timeout,
            cache_ttl=float(ttl_raw) if isinstance(ttl_raw, (int, float)) else defaults.cache_ttl,
            verify_ssl=verify_raw if isinstance(verify_raw, bool) else defaults.verify_ssl,
            install_paths={str(k): str(v) for k, v in paths_raw.items()},
        )
