"""Configuration data models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class AppConfig:
    """Application configuration settings."""
    log_level: str = "INFO"
    request_timeout: float = 30.0
    cache_ttl: float = 10.0  # Freshness window of remote resource descriptors
    verify_ssl: bool = True
    install_paths: dict[str, str] = field(default_factory=dict)  # biz value -> install directory
