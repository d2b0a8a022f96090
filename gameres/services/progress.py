"""Progress accounting against files already present in the install directory."""

from pathlib import Path

import structlog

from ..models.progress import DownloadPackageState
from ..models.resource import DiffPackage, FullPackage, GamePackage, SegmentedPackage, VoicePack
from .errors import FileSystemError
from .filesystem import FileSystemService

log = structlog.stdlib.get_logger()


class ProgressAccountant:
    """Reports how many bytes of each expected package are already on disk.

    A completed file counts in full, otherwise a ``<name>_tmp`` partial counts,
    otherwise nothing. Sizes and hashes are not cross-checked, so a stale file
    with the expected name is taken as progress.
    """

    def __init__(self, filesystem: FileSystemService | None = None) -> None:
        self._filesystem = filesystem or FileSystemService()

    def measure_file(self, name: str, install_path: Path) -> int:
        """Bytes present for a single file name.

        Raises:
            FileSystemError: If the install directory cannot be inspected
        """
        try:
            return self._filesystem.get_partial_size(install_path, name)
        except OSError as e:
            raise FileSystemError(
                "Unable to inspect downloaded files.",
                original_error=e,
                path=str(install_path / name),
                operation="measure",
            ) from e

    def measure(self, package: GamePackage | VoicePack, install_path: Path) -> DownloadPackageState:
        """Download state of one package.

        A segmented package is reported as a single state whose downloaded
        size is the sum over its segments.

        Raises:
            FileSystemError: If the install directory cannot be inspected
        """
        if isinstance(package, SegmentedPackage):
            downloaded = sum(self.measure_file(segment.name, install_path) for segment in package.segments)
            state = DownloadPackageState(
                name=package.name,
                url="",
                package_size=package.package_size,
                decompressed_size=package.size,
                downloaded_size=downloaded,
            )
        elif isinstance(package, (FullPackage, DiffPackage, VoicePack)):
            state = DownloadPackageState(
                name=package.name,
                url=package.path,
                package_size=package.package_size,
                decompressed_size=package.size,
                downloaded_size=self.measure_file(package.name, install_path),
            )
        else:
            raise TypeError(f"Unsupported package type: {type(package).__name__}")

        log.debug(
            "Measured package",
            name=state.name,
            downloaded=state.downloaded_size,
            package_size=state.package_size,
        )
        return state
