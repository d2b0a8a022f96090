"""Data models for the game resource resolver."""

from .config import AppConfig
from .game import (
    GAME_PROFILES,
    NO_VOICE_LANGUAGE,
    VOICE_LANGUAGE_CODES,
    VOICE_LANGUAGE_LABELS,
    VOICE_LANGUAGE_ORDER,
    GameBiz,
    GameProfile,
    GameVersion,
    VoiceLanguage,
    iter_voice_languages,
    parse_version,
)
from .progress import DownloadGameResource, DownloadPackageState
from .resource import (
    DiffPackage,
    FullPackage,
    GamePackage,
    GameResource,
    LatestPackage,
    LauncherGameResource,
    PackageSegment,
    SegmentedPackage,
    VoicePack,
    find_voice_pack,
)

__all__ = [
    "AppConfig",
    "DiffPackage",
    "DownloadGameResource",
    "DownloadPackageState",
    "FullPackage",
    "GAME_PROFILES",
    "GameBiz",
    "GamePackage",
    "GameProfile",
    "GameResource",
    "GameVersion",
    "LatestPackage",
    "LauncherGameResource",
    "NO_VOICE_LANGUAGE",
    "PackageSegment",
    "SegmentedPackage",
    "VOICE_LANGUAGE_CODES",
    "VOICE_LANGUAGE_LABELS",
    "VOICE_LANGUAGE_ORDER",
    "VoiceLanguage",
    "VoicePack",
    "find_voice_pack",
    "iter_voice_languages",
    "parse_version",
]
