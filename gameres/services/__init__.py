"""Service layer: resolution logic and its file system and network collaborators."""

from .config import ConfigurationService, ValidationResult
from .errors import (
    AppError,
    ConfigurationError,
    ErrorCategory,
    ErrorHandlingService,
    ErrorSeverity,
    FileSystemError,
    RemoteFetchError,
    UnknownGameIdentityError,
    UserFriendlyError,
    ValidationError,
    get_error_service,
    handle_error,
)
from .filesystem import FileSystemService
from .game_resource import GameResourceService
from .http_client import HttpClientService
from .launcher_client import LauncherClient
from .plan_resolver import DownloadPlanResolver
from .profiles import get_game_profile, parse_game_biz
from .progress import ProgressAccountant
from .readiness import PreDownloadReadinessCheck
from .resource_cache import MemoryCache, RemoteResourceCache, get_memory_cache
from .version_marker import VersionMarker
from .voice_language import VoiceLanguageState

__all__ = [
    "AppError",
    "ConfigurationError",
    "ConfigurationService",
    "DownloadPlanResolver",
    "ErrorCategory",
    "ErrorHandlingService",
    "ErrorSeverity",
    "FileSystemError",
    "FileSystemService",
    "GameResourceService",
    "HttpClientService",
    "LauncherClient",
    "MemoryCache",
    "PreDownloadReadinessCheck",
    "ProgressAccountant",
    "RemoteFetchError",
    "RemoteResourceCache",
    "UnknownGameIdentityError",
    "UserFriendlyError",
    "ValidationError",
    "ValidationResult",
    "VersionMarker",
    "VoiceLanguageState",
    "get_error_service",
    "get_game_profile",
    "get_memory_cache",
    "handle_error",
    "parse_game_biz",
]
