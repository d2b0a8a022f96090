"""Game resource service: install lookup, versions, voice languages and download plans."""

from pathlib import Path

import structlog

from ..models import AppConfig, DownloadGameResource, GameBiz, GameVersion, VoiceLanguage
from ..models.resource import LauncherGameResource
from .config import ConfigurationService
from .filesystem import FileSystemService
from .plan_resolver import DownloadPlanResolver
from .profiles import get_game_profile
from .readiness import PreDownloadReadinessCheck
from .resource_cache import RemoteResourceCache
from .version_marker import VersionMarker
from .voice_language import VoiceLanguageState

log = structlog.stdlib.get_logger()


class GameResourceService:
    """Entry point used by a download orchestrator.

    Combines the configured install locations with the resolver components.
    """

    def __init__(
        self,
        config_service: ConfigurationService,
        resource_cache: RemoteResourceCache,
        filesystem: FileSystemService | None = None,
    ) -> None:
        self._config_service = config_service
        self._config: AppConfig = config_service.load_config()
        self._filesystem = filesystem or FileSystemService()
        self._resource_cache = resource_cache
        self._version_marker = VersionMarker(self._filesystem)
        self._voice_language_state = VoiceLanguageState(self._filesystem)
        self._resolver = DownloadPlanResolver(
            resource_cache,
            version_marker=self._version_marker,
            voice_language_state=self._voice_language_state,
            filesystem=self._filesystem,
        )
        self._readiness = PreDownloadReadinessCheck(
            resource_cache,
            version_marker=self._version_marker,
            voice_language_state=self._voice_language_state,
            filesystem=self._filesystem,
        )

    @staticmethod
    def get_game_exe_name(biz: GameBiz) -> str:
        return get_game_profile(biz).exe_name

    def get_game_install_path(self, biz: GameBiz) -> Path | None:
        """Configured install directory; forgotten when it no longer exists."""
        path = self._config_service.get_install_path(self._config, biz)
        if path is None:
            return None
        if path.is_dir():
            return path

        log.info("Game install path not found, clearing it", biz=biz.value, path=str(path))
        self.set_game_install_path(biz, None)
        return None

    def set_game_install_path(self, biz: GameBiz, path: Path | None) -> None:
        self._config = self._config_service.with_install_path(self._config, biz, path)
        self._config_service.save_config(self._config)

    def is_game_exe_exists(self, biz: GameBiz) -> bool:
        path = self.get_game_install_path(biz)
        if path is None:
            return False
        return (path / self.get_game_exe_name(biz)).is_file()

    async def get_game_local_version(self, biz: GameBiz, install_path: Path | None = None) -> GameVersion | None:
        install_path = install_path or self.get_game_install_path(biz)
        if install_path is None:
            return None
        version = await self._version_marker.read(install_path)
        log.info("Local game version", biz=biz.value, version=str(version) if version else None)
        return version

    async def set_game_local_version(self, biz: GameBiz, install_path: Path, version: GameVersion) -> None:
        """Record ``version`` once the orchestrator has finished installing it."""
        await self._version_marker.write(install_path, version)
        log.info("Local game version updated", biz=biz.value, version=str(version))

    async def get_game_resource(self, biz: GameBiz) -> LauncherGameResource:
        return await self._resource_cache.get(biz)

    async def get_game_resource_version(self, biz: GameBiz) -> tuple[GameVersion | None, GameVersion | None]:
        """Latest published version and pre-download version, if any."""
        resource = await self.get_game_resource(biz)
        pre_download = resource.pre_download_game.latest.version if resource.pre_download_game else None
        return resource.game.latest.version, pre_download

    async def check_download_game_resource(self, biz: GameBiz, install_path: Path) -> DownloadGameResource | None:
        return await self._resolver.resolve(biz, install_path)

    async def check_pre_download_is_ok(self, biz: GameBiz, install_path: Path | None = None) -> bool:
        install_path = install_path or self.get_game_install_path(biz)
        if install_path is None:
            return False
        return await self._readiness.is_ready(biz, install_path)

    async def get_voice_language(self, biz: GameBiz, install_path: Path | None = None) -> VoiceLanguage:
        install_path = install_path or self.get_game_install_path(biz)
        if install_path is None:
            return VoiceLanguage(0)
        return await self._voice_language_state.read(biz, install_path)

    async def set_voice_language(self, biz: GameBiz, install_path: Path, languages: VoiceLanguage) -> None:
        await self._voice_language_state.write(biz, install_path, languages)
