"""Check whether a published pre-download is already staged on disk."""

from pathlib import Path

import structlog

from ..models.game import GameBiz, iter_voice_languages
from ..models.resource import SegmentedPackage, find_voice_pack
from .filesystem import FileSystemService
from .plan_resolver import select_package
from .resource_cache import RemoteResourceCache
from .version_marker import VersionMarker
from .voice_language import VoiceLanguageState

log = structlog.stdlib.get_logger()


class PreDownloadReadinessCheck:
    """Read-only check that every pre-download file exists under its final name.

    Existence only: partial ``_tmp`` files never count and sizes are not verified.
    """

    def __init__(
        self,
        resource_cache: RemoteResourceCache,
        version_marker: VersionMarker | None = None,
        voice_language_state: VoiceLanguageState | None = None,
        filesystem: FileSystemService | None = None,
    ) -> None:
        self._filesystem = filesystem or FileSystemService()
        self._resource_cache = resource_cache
        self._version_marker = version_marker or VersionMarker(self._filesystem)
        self._voice_language_state = voice_language_state or VoiceLanguageState(self._filesystem)

    async def is_ready(self, biz: GameBiz, install_path: Path) -> bool:
        resource = await self._resource_cache.get(biz)
        if resource.pre_download_game is None:
            return False

        local_version = await self._version_marker.read(install_path)
        package = select_package(resource.pre_download_game, local_version)

        if isinstance(package, SegmentedPackage):
            names = [segment.name for segment in package.segments]
        else:
            names = [package.name]

        languages = await self._voice_language_state.read(biz, install_path)
        for language in iter_voice_languages(languages):
            pack = find_voice_pack(package, language)
            if pack is not None:
                names.append(pack.name)

        missing = [name for name in names if not self._filesystem.file_exists(install_path / name)]
        if missing:
            log.info("Pre-download not complete", biz=biz.value, missing=missing)
            return False

        log.info("Pre-download is complete", biz=biz.value, files=len(names))
        return True
