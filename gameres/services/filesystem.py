"""File system service for marker files, partial downloads and disk space."""

import os
import shutil
from pathlib import Path

import structlog

log = structlog.stdlib.get_logger()

TEMP_SUFFIX = "_tmp"


class FileSystemService:
    """Service for the file system operations the resolver relies on.

    Methods raise the underlying ``OSError``; callers decide whether to wrap
    it into a ``FileSystemError``.
    """

    def ensure_directory(self, path: Path) -> None:
        """Ensure that a directory exists, creating it if necessary.

        Raises:
            OSError: If the directory cannot be created or a file is in the way
        """
        try:
            if path.exists():
                if not path.is_dir():
                    log.error("Path exists but is not a directory", path=str(path))
                    raise NotADirectoryError(f"Path exists but is not a directory: {path}")
                return

            log.debug("Creating directory", path=str(path))
            path.mkdir(parents=True, exist_ok=True)

        except OSError as e:
            log.error("Failed to create directory", path=str(path), error=str(e))
            raise

    def get_file_size(self, path: Path) -> int | None:
        """Size of a regular file in bytes, or None when no such file exists.

        Raises:
            OSError: If the file exists but cannot be inspected
        """
        try:
            stat = path.stat()
        except FileNotFoundError:
            return None
        except NotADirectoryError:
            return None
        if not path.is_file():
            return None
        return stat.st_size

    def file_exists(self, path: Path) -> bool:
        return path.is_file()

    def get_partial_size(self, directory: Path, name: str) -> int:
        """Bytes present for ``name``: the final file, else its ``_tmp`` partial, else 0."""
        size = self.get_file_size(directory / name)
        if size is None:
            size = self.get_file_size(directory / f"{name}{TEMP_SUFFIX}")
        return size or 0

    def get_available_space(self, path: Path) -> int:
        """Get available disk space for the volume holding ``path``.

        ``path`` does not need to exist yet; the nearest existing ancestor
        is queried instead.

        Raises:
            OSError: If disk space cannot be determined
        """
        check_path = path.absolute()
        try:
            while not check_path.exists() and check_path != check_path.parent:
                check_path = check_path.parent

            available_space = shutil.disk_usage(check_path).free

            log.debug(
                "Retrieved disk space information",
                path=str(path),
                check_path=str(check_path),
                available_bytes=available_space,
            )
            return available_space

        except OSError as e:
            log.error("Failed to get available disk space", path=str(path), error=str(e))
            raise

    def read_text(self, path: Path) -> str | None:
        """Read a UTF-8 text file, returning None when it does not exist.

        Undecodable bytes become U+FFFD so a stray byte in an unrelated line
        does not hide the rest of the file.

        Raises:
            OSError: If the file exists but cannot be read
        """
        try:
            with open(path, "r", encoding="utf-8-sig", errors="replace") as f:
                return f.read()
        except FileNotFoundError:
            return None

    def write_text_atomic(self, path: Path, content: str) -> None:
        """Replace ``path`` with ``content`` without ever exposing a truncated file.

        The content goes to a sibling temporary file first, which is then
        renamed over the destination.

        Raises:
            OSError: If the file cannot be written
        """
        self.ensure_directory(path.parent)
        temp_path = path.with_name(f".{path.name}.{os.getpid()}.partial")

        log.debug("Writing file", path=str(path), temp_path=str(temp_path))
        try:
            with open(temp_path, "w", encoding="utf-8", newline="\n") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, path)
        except BaseException as e:
            log.error("Failed to write file", path=str(path), error=str(e))
            if temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    log.warning("Failed to clean up temporary file", path=str(temp_path))
            raise

        log.info("File written", path=str(path), size=len(content.encode("utf-8")))
