"""Remote launcher resource models.

The launcher ``resource`` endpoint describes the latest full package of a game
(either one archive or a list of segments), binary diff packages keyed by the
version they patch from, and optionally the next version's pre-download.
"""

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any
from urllib.parse import urlsplit

import structlog

from .game import GameVersion, VoiceLanguage, parse_version, voice_language_from_code

log = structlog.stdlib.get_logger()


def file_name_from_url(url: str) -> str:
    """Final path component of a package URL."""
    return PurePosixPath(urlsplit(url).path).name


def _int(value: Any) -> int:
    # The API serialises sizes as strings
    if value is None or value == "":
        return 0
    return int(value)


@dataclass(frozen=True)
class VoicePack:
    """Language-specific audio package."""
    language: VoiceLanguage
    path: str
    package_size: int
    size: int
    md5: str = ""

    @property
    def name(self) -> str:
        return file_name_from_url(self.path)


@dataclass(frozen=True)
class PackageSegment:
    """One part of a split full package."""
    path: str
    package_size: int
    md5: str = ""

    @property
    def name(self) -> str:
        return file_name_from_url(self.path)


@dataclass(frozen=True)
class FullPackage:
    """Full game package shipped as a single archive."""
    version: GameVersion | None
    path: str
    package_size: int
    size: int
    voice_packs: tuple[VoicePack, ...] = ()
    md5: str = ""

    @property
    def name(self) -> str:
        return file_name_from_url(self.path)


@dataclass(frozen=True)
class SegmentedPackage:
    """Full game package split into sequentially named parts."""
    version: GameVersion | None
    segments: tuple[PackageSegment, ...]
    package_size: int
    size: int
    voice_packs: tuple[VoicePack, ...] = ()

    @property
    def name(self) -> str:
        """Archive name shared by the segments (``game.zip.001`` -> ``game.zip``)."""
        first = PurePosixPath(self.segments[0].name)
        if first.suffix[1:].isdigit():
            return first.stem
        return first.name


@dataclass(frozen=True)
class DiffPackage:
    """Binary diff updating ``source_version`` to the latest version."""
    source_version: GameVersion
    path: str
    package_size: int
    size: int
    voice_packs: tuple[VoicePack, ...] = ()
    md5: str = ""

    @property
    def name(self) -> str:
        return file_name_from_url(self.path)


LatestPackage = FullPackage | SegmentedPackage
GamePackage = FullPackage | SegmentedPackage | DiffPackage


def find_voice_pack(package: GamePackage, language: VoiceLanguage) -> VoicePack | None:
    """Voice pack of ``package`` for a single language, if offered."""
    for pack in package.voice_packs:
        if pack.language == language:
            return pack
    return None


@dataclass(frozen=True)
class GameResource:
    """Latest package of a game plus the diffs leading to it."""
    latest: LatestPackage
    diffs: tuple[DiffPackage, ...] = ()

    def find_diff(self, version: GameVersion | None) -> DiffPackage | None:
        if version is None:
            return None
        for diff in self.diffs:
            if diff.source_version == version:
                return diff
        return None


@dataclass(frozen=True)
class LauncherGameResource:
    """Resource descriptor returned by the launcher backend for one game."""
    game: GameResource
    pre_download_game: GameResource | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LauncherGameResource":
        """Build from the ``data`` object of the resource API response.

        Raises:
            AttributeError, KeyError, TypeError, ValueError: If the document is malformed
        """
        pre_download = data.get("pre_download_game")
        return cls(
            game=_game_resource_from_dict(data["game"]),
            pre_download_game=_game_resource_from_dict(pre_download) if pre_download else None,
        )


def _voice_packs_from_list(items: list[dict[str, Any]] | None) -> tuple[VoicePack, ...]:
    packs: list[VoicePack] = []
    for item in items or []:
        language = voice_language_from_code(str(item.get("language", "")))
        if language is None:
            log.warning(
                "Skipping voice pack with unknown language",
                language=item.get("language"),
                path=item.get("path"),
            )
            continue
        packs.append(
            VoicePack(
                language=language,
                path=item["path"],
                package_size=_int(item.get("package_size")),
                size=_int(item.get("size")),
                md5=item.get("md5") or "",
            )
        )
    return tuple(packs)


def _latest_from_dict(data: dict[str, Any]) -> LatestPackage:
    version = parse_version(data.get("version"))
    voice_packs = _voice_packs_from_list(data.get("voice_packs"))
    path = data.get("path") or ""
    if path.strip():
        return FullPackage(
            version=version,
            path=path,
            package_size=_int(data.get("package_size")),
            size=_int(data.get("size")),
            voice_packs=voice_packs,
            md5=data.get("md5") or "",
        )

    segments = tuple(
        PackageSegment(
            path=segment["path"],
            package_size=_int(segment.get("package_size")),
            md5=segment.get("md5") or "",
        )
        for segment in data.get("segments") or []
    )
    if not segments:
        raise ValueError("Latest package has neither a path nor segments")
    package_size = _int(data.get("package_size")) or sum(s.package_size for s in segments)
    return SegmentedPackage(
        version=version,
        segments=segments,
        package_size=package_size,
        size=_int(data.get("size")),
        voice_packs=voice_packs,
    )


def _diff_from_dict(data: dict[str, Any]) -> DiffPackage | None:
    source_version = parse_version(data.get("version"))
    if source_version is None:
        return None
    return DiffPackage(
        source_version=source_version,
        path=data["path"],
        package_size=_int(data.get("package_size")),
        size=_int(data.get("size")),
        voice_packs=_voice_packs_from_list(data.get("voice_packs")),
        md5=data.get("md5") or "",
    )


def _game_resource_from_dict(data: dict[str, Any]) -> GameResource:
    diffs = [_diff_from_dict(item) for item in data.get("diffs") or []]
    return GameResource(
        latest=_latest_from_dict(data["latest"]),
        diffs=tuple(diff for diff in diffs if diff is not None),
    )
