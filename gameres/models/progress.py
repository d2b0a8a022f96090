"""Download plan and progress accounting models."""

from dataclasses import dataclass, field


@dataclass
class DownloadPackageState:
    """Bytes already on disk for one package compared to its expected size."""
    name: str
    url: str
    package_size: int
    decompressed_size: int
    downloaded_size: int = 0

    @property
    def remaining_size(self) -> int:
        return max(self.package_size - self.downloaded_size, 0)

    @property
    def is_complete(self) -> bool:
        return self.downloaded_size >= self.package_size


@dataclass
class DownloadGameResource:
    """Everything that still has to be fetched to bring an installation current."""
    free_space: int
    game: DownloadPackageState | None = None
    voices: list[DownloadPackageState] = field(default_factory=list)

    def _states(self) -> list[DownloadPackageState]:
        states = [self.game] if self.game is not None else []
        return states + self.voices

    @property
    def total_package_size(self) -> int:
        return sum(state.package_size for state in self._states())

    @property
    def total_decompressed_size(self) -> int:
        return sum(state.decompressed_size for state in self._states())

    @property
    def total_downloaded_size(self) -> int:
        return sum(state.downloaded_size for state in self._states())

    @property
    def remaining_size(self) -> int:
        return sum(state.remaining_size for state in self._states())

    @property
    def has_enough_space(self) -> bool:
        """Whether the volume can hold the remaining downloads."""
        return self.free_space >= self.remaining_size
