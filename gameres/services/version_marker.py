"""Installed game version stored in the installation's ``config.ini``."""

import re
from pathlib import Path

import structlog

from ..models.game import GameVersion, parse_version
from .errors import FileSystemError
from .filesystem import FileSystemService

log = structlog.stdlib.get_logger()

CONFIG_FILE_NAME = "config.ini"
VERSION_KEY = "game_version"

_VERSION_LINE = re.compile(rf"^[ \t]*{VERSION_KEY}[ \t]*=(.*)$", re.MULTILINE)


class VersionMarker:
    """Reads and writes the ``game_version=`` line of ``config.ini``.

    Other keys in the file are left untouched.
    """

    def __init__(self, filesystem: FileSystemService | None = None) -> None:
        self._filesystem = filesystem or FileSystemService()

    async def read(self, install_path: Path) -> GameVersion | None:
        """Installed version, or None when absent.

        An unparsable value is treated like a missing marker.

        Raises:
            FileSystemError: If the marker exists but cannot be read
        """
        config = install_path / CONFIG_FILE_NAME
        try:
            content = self._filesystem.read_text(config)
        except OSError as e:
            raise FileSystemError(
                "Unable to read the installed game version.",
                original_error=e,
                path=str(config),
                operation="read_version",
            ) from e

        if content is None:
            log.warning("config.ini not found", path=str(config))
            return None

        match = _VERSION_LINE.search(content)
        raw = match.group(1).strip() if match else None
        version = parse_version(raw)
        if version is None:
            log.warning("Unreadable game version in config.ini", path=str(config), raw=raw)
        return version

    async def write(self, install_path: Path, version: GameVersion) -> None:
        """Record ``version`` as installed, keeping the other keys of the file.

        Raises:
            FileSystemError: If the marker cannot be read or written
        """
        config = install_path / CONFIG_FILE_NAME
        try:
            content = self._filesystem.read_text(config) or ""
            line = f"{VERSION_KEY}={version}"
            if _VERSION_LINE.search(content):
                content = _VERSION_LINE.sub(line, content, count=1)
            else:
                if content and not content.endswith("\n"):
                    content += "\n"
                if not content:
                    content = "[General]\n"
                content += line + "\n"
            self._filesystem.write_text_atomic(config, content)
        except OSError as e:
            raise FileSystemError(
                "Unable to record the installed game version.",
                original_error=e,
                path=str(config),
                operation="write_version",
            ) from e

        log.info("Game version recorded", path=str(config), version=str(version))
