"""Resolution of what has to be downloaded to bring an installation current."""

from pathlib import Path

import structlog

from ..models.game import VOICE_LANGUAGE_CODES, GameBiz, GameVersion, VoiceLanguage, iter_voice_languages
from ..models.progress import DownloadGameResource, DownloadPackageState
from ..models.resource import GamePackage, GameResource, LauncherGameResource, find_voice_pack
from .errors import FileSystemError
from .filesystem import FileSystemService
from .progress import ProgressAccountant
from .resource_cache import RemoteResourceCache
from .version_marker import VersionMarker
from .voice_language import VoiceLanguageState

log = structlog.stdlib.get_logger()


def select_target_resource(
    resource: LauncherGameResource,
    local_version: GameVersion | None,
) -> GameResource | None:
    """Pick the resource an installation at ``local_version`` should download.

    - not installed: the current game
    - a pre-download is published: the pre-download, whatever the versions
    - the current game is newer: the current game
    - otherwise nothing
    """
    if local_version is None:
        return resource.game
    if resource.pre_download_game is not None:
        return resource.pre_download_game
    latest = resource.game.latest.version
    if latest is not None and latest > local_version:
        return resource.game
    return None


def select_package(target: GameResource, local_version: GameVersion | None) -> GamePackage:
    """Diff patching ``local_version`` when one exists, else the full latest package."""
    diff = target.find_diff(local_version)
    if diff is not None:
        return diff
    return target.latest


class DownloadPlanResolver:
    """Builds a ``DownloadGameResource`` plan for an installation."""

    def __init__(
        self,
        resource_cache: RemoteResourceCache,
        version_marker: VersionMarker | None = None,
        voice_language_state: VoiceLanguageState | None = None,
        accountant: ProgressAccountant | None = None,
        filesystem: FileSystemService | None = None,
    ) -> None:
        self._filesystem = filesystem or FileSystemService()
        self._resource_cache = resource_cache
        self._version_marker = version_marker or VersionMarker(self._filesystem)
        self._voice_language_state = voice_language_state or VoiceLanguageState(self._filesystem)
        self._accountant = accountant or ProgressAccountant(self._filesystem)

    async def resolve(self, biz: GameBiz, install_path: Path) -> DownloadGameResource | None:
        """Plan for ``install_path``, or None when it is already current.

        Only voice packs of languages currently installed are included.

        Raises:
            UnknownGameIdentityError: If ``biz`` is not recognised
            RemoteFetchError: If the resource descriptor cannot be fetched
            FileSystemError: If the install directory or its volume cannot be read
        """
        local_version = await self._version_marker.read(install_path)
        resource = await self._resource_cache.get(biz)

        target = select_target_resource(resource, local_version)
        if target is None:
            log.info("Game is up to date", biz=biz.value, local_version=str(local_version))
            return None

        package = select_package(target, local_version)
        languages = await self._voice_language_state.read(biz, install_path)

        plan = DownloadGameResource(
            free_space=self._get_free_space(install_path),
            game=self._accountant.measure(package, install_path),
            voices=self._measure_voices(package, languages, install_path),
        )

        log.info(
            "Download plan resolved",
            biz=biz.value,
            local_version=str(local_version) if local_version else None,
            pre_download=target is resource.pre_download_game,
            package=type(package).__name__,
            voices=[state.name for state in plan.voices],
            remaining_bytes=plan.remaining_size,
            free_space=plan.free_space,
        )
        return plan

    def _measure_voices(
        self,
        package: GamePackage,
        languages: VoiceLanguage,
        install_path: Path,
    ) -> list[DownloadPackageState]:
        states: list[DownloadPackageState] = []
        for language in iter_voice_languages(languages):
            pack = find_voice_pack(package, language)
            if pack is None:
                continue
            state = self._accountant.measure(pack, install_path)
            state.name = VOICE_LANGUAGE_CODES[language]
            states.append(state)
        return states

    def _get_free_space(self, install_path: Path) -> int:
        try:
            return self._filesystem.get_available_space(install_path)
        except OSError as e:
            raise FileSystemError(
                "Unable to determine free disk space.",
                original_error=e,
                path=str(install_path),
                operation="free_space",
            ) from e
