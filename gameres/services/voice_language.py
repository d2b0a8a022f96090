"""Installed voice-over languages, persisted in a game-specific marker file."""

from pathlib import Path

import structlog

from ..models.game import (
    NO_VOICE_LANGUAGE,
    VOICE_LANGUAGE_LABELS,
    GameBiz,
    VoiceLanguage,
    iter_voice_languages,
    voice_language_from_label,
)
from .errors import FileSystemError
from .filesystem import FileSystemService
from .profiles import get_game_profile

log = structlog.stdlib.get_logger()


class VoiceLanguageState:
    """Reads and writes the voice language marker of an installation."""

    def __init__(self, filesystem: FileSystemService | None = None) -> None:
        self._filesystem = filesystem or FileSystemService()

    def marker_path(self, biz: GameBiz, install_path: Path) -> Path | None:
        """Marker file to read: the primary location, else the renamed-folder fallback.

        Returns None for games that do not keep a voice marker.
        """
        profile = get_game_profile(biz)
        if profile.voice_marker is None:
            return None
        primary = install_path.joinpath(*profile.voice_marker)
        if primary.is_file() or profile.voice_marker_fallback is None:
            return primary
        fallback = install_path.joinpath(*profile.voice_marker_fallback)
        if fallback.is_file():
            log.debug("Using fallback voice marker", biz=biz.value, path=str(fallback))
            return fallback
        return primary

    async def read(self, biz: GameBiz, install_path: Path) -> VoiceLanguage:
        """Languages listed in the marker; the empty set when there is none.

        Raises:
            UnknownGameIdentityError: If ``biz`` is not recognised
            FileSystemError: If the marker exists but cannot be read
        """
        path = self.marker_path(biz, install_path)
        if path is None:
            return NO_VOICE_LANGUAGE

        try:
            content = self._filesystem.read_text(path)
        except OSError as e:
            raise FileSystemError(
                "Unable to read the installed voice languages.",
                original_error=e,
                path=str(path),
                operation="read_voice_language",
            ) from e
        if content is None:
            return NO_VOICE_LANGUAGE

        languages = NO_VOICE_LANGUAGE
        for line in content.splitlines():
            language = voice_language_from_label(line.strip().lstrip("\ufeff"))
            if language is not None:
                languages |= language

        log.debug(
            "Voice languages read",
            biz=biz.value,
            path=str(path),
            languages=[VOICE_LANGUAGE_LABELS[lang] for lang in iter_voice_languages(languages)],
        )
        return languages

    async def write(self, biz: GameBiz, install_path: Path, languages: VoiceLanguage) -> None:
        """Replace the marker with one label per language, in the fixed order.

        The previous marker stays intact if the write is interrupted.

        Raises:
            UnknownGameIdentityError: If ``biz`` is not recognised
            FileSystemError: If the marker cannot be written
        """
        profile = get_game_profile(biz)
        if profile.voice_marker is None:
            log.info("Game has no voice language marker, nothing written", biz=biz.value)
            return

        path = install_path.joinpath(*profile.voice_marker)
        lines = [VOICE_LANGUAGE_LABELS[lang] for lang in iter_voice_languages(languages)]
        content = "".join(f"{line}\n" for line in lines)
        try:
            self._filesystem.write_text_atomic(path, content)
        except OSError as e:
            raise FileSystemError(
                "Unable to save the voice language selection.",
                original_error=e,
                path=str(path),
                operation="write_voice_language",
            ) from e

        log.info("Voice languages written", biz=biz.value, path=str(path), languages=lines)
