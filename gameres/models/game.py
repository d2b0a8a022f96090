"""Game identity, version and voice language models."""

import re
from dataclasses import dataclass
from enum import Enum, Flag


class GameBiz(Enum):
    """Game and regional distribution tag."""
    HK4E_CN = "hk4e_cn"
    HK4E_GLOBAL = "hk4e_global"
    HKRPG_CN = "hkrpg_cn"
    HKRPG_GLOBAL = "hkrpg_global"
    BH3_CN = "bh3_cn"
    BH3_GLOBAL = "bh3_global"


class VoiceLanguage(Flag):
    """Set of installed voice-over languages."""
    CHINESE = 1
    ENGLISH = 2
    JAPANESE = 4
    KOREAN = 8


# Fixed order used when writing markers and listing voice packs
VOICE_LANGUAGE_ORDER: tuple[VoiceLanguage, ...] = (
    VoiceLanguage.CHINESE,
    VoiceLanguage.ENGLISH,
    VoiceLanguage.JAPANESE,
    VoiceLanguage.KOREAN,
)

# Labels stored in the in-game voice marker file (must match byte-for-byte)
VOICE_LANGUAGE_LABELS: dict[VoiceLanguage, str] = {
    VoiceLanguage.CHINESE: "Chinese",
    VoiceLanguage.ENGLISH: "English(US)",
    VoiceLanguage.JAPANESE: "Japanese",
    VoiceLanguage.KOREAN: "Korean",
}

# Language codes used by the launcher resource API
VOICE_LANGUAGE_CODES: dict[VoiceLanguage, str] = {
    VoiceLanguage.CHINESE: "zh-cn",
    VoiceLanguage.ENGLISH: "en-us",
    VoiceLanguage.JAPANESE: "ja-jp",
    VoiceLanguage.KOREAN: "ko-kr",
}

NO_VOICE_LANGUAGE = VoiceLanguage(0)


def voice_language_from_code(code: str) -> VoiceLanguage | None:
    """Map a remote language code (e.g. ``ja-jp``) to a language flag."""
    normalized = code.strip().lower()
    for language, known in VOICE_LANGUAGE_CODES.items():
        if known == normalized:
            return language
    return None


def voice_language_from_label(label: str) -> VoiceLanguage | None:
    """Map a voice marker label to a language flag, exact match only."""
    for language, known in VOICE_LANGUAGE_LABELS.items():
        if known == label:
            return language
    return None


def iter_voice_languages(languages: VoiceLanguage) -> list[VoiceLanguage]:
    """List the single languages contained in a set, in the fixed order."""
    return [lang for lang in VOICE_LANGUAGE_ORDER if lang in languages]


_VERSION_PATTERN = re.compile(r"^\d+(\.\d+){1,3}$")


@dataclass(frozen=True, order=True)
class GameVersion:
    """Dotted numeric game version such as ``4.0.1``."""
    parts: tuple[int, ...]

    def __str__(self) -> str:
        return ".".join(str(part) for part in self.parts)


def parse_version(text: str | None) -> GameVersion | None:
    """Parse a version string, returning None when it is not a valid version."""
    if text is None:
        return None
    candidate = text.strip()
    if not _VERSION_PATTERN.match(candidate):
        return None
    return GameVersion(tuple(int(part) for part in candidate.split(".")))


@dataclass(frozen=True)
class GameProfile:
    """Per-identity naming and endpoint data."""
    biz: GameBiz
    exe_name: str
    data_folder: str
    resource_url: str
    voice_marker: tuple[str, ...] | None = None  # relative to the install path
    voice_marker_fallback: tuple[str, ...] | None = None


_HK4E_CN_MARKER = ("YuanShen_Data", "Persistent", "audio_lang_14")
_HK4E_GLOBAL_MARKER = ("GenshinImpact_Data", "Persistent", "audio_lang_14")
_HKRPG_MARKER = ("StarRail_Data", "Persistent", "AudioLaucherRecord.txt")

GAME_PROFILES: dict[GameBiz, GameProfile] = {
    GameBiz.HK4E_CN: GameProfile(
        biz=GameBiz.HK4E_CN,
        exe_name="YuanShen.exe",
        data_folder="YuanShen_Data",
        resource_url="https://sdk-static.mihoyo.com/hk4e_cn/mdk/launcher/api/resource?key=eYd89JmJ&launcher_id=18",
        voice_marker=_HK4E_CN_MARKER,
        # Data folder is renamed when an install is migrated between regions
        voice_marker_fallback=_HK4E_GLOBAL_MARKER,
    ),
    GameBiz.HK4E_GLOBAL: GameProfile(
        biz=GameBiz.HK4E_GLOBAL,
        exe_name="GenshinImpact.exe",
        data_folder="GenshinImpact_Data",
        resource_url="https://sdk-os-static.mihoyo.com/hk4e_global/mdk/launcher/api/resource?key=gcStgarh&launcher_id=10",
        voice_marker=_HK4E_GLOBAL_MARKER,
        voice_marker_fallback=_HK4E_CN_MARKER,
    ),
    GameBiz.HKRPG_CN: GameProfile(
        biz=GameBiz.HKRPG_CN,
        exe_name="StarRail.exe",
        data_folder="StarRail_Data",
        resource_url="https://api-launcher.mihoyo.com/hkrpg_cn/mdk/launcher/api/resource?key=6KcVuOkbcqjJomjZ&launcher_id=33",
        voice_marker=_HKRPG_MARKER,
        voice_marker_fallback=_HKRPG_MARKER,
    ),
    GameBiz.HKRPG_GLOBAL: GameProfile(
        biz=GameBiz.HKRPG_GLOBAL,
        exe_name="StarRail.exe",
        data_folder="StarRail_Data",
        resource_url="https://hkrpg-launcher-static.hoyoverse.com/hkrpg_global/mdk/launcher/api/resource?key=vplOVX8Vn7cwG8yb&launcher_id=35",
        voice_marker=_HKRPG_MARKER,
        voice_marker_fallback=_HKRPG_MARKER,
    ),
    GameBiz.BH3_CN: GameProfile(
        biz=GameBiz.BH3_CN,
        exe_name="BH3.exe",
        data_folder="BH3_Data",
        resource_url="https://bh3-launcher-static.mihoyo.com/bh3_cn/mdk/launcher/api/resource?key=SyvuPnqL&launcher_id=4",
    ),
    GameBiz.BH3_GLOBAL: GameProfile(
        biz=GameBiz.BH3_GLOBAL,
        exe_name="BH3.exe",
        data_folder="BH3_Data",
        resource_url="https://bh3-launcher-static.hoyoverse.com/bh3_global/mdk/launcher/api/resource?key=dpz65xJ3&launcher_id=10",
    ),
}
