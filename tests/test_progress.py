"""Tests for progress accounting against files on disk."""

import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest
from hypothesis import given, settings, strategies as st

from gameres.models import VoiceLanguage
from gameres.services import FileSystemError, FileSystemService, ProgressAccountant

from factories import diff_package, full_package, segmented_package, voice_pack, write_file


def test_completed_file_counts_in_full(tmp_path: Path) -> None:
    package = full_package("1.3.0", package_size=4096)
    write_file(tmp_path / package.name, 4096)

    state = ProgressAccountant().measure(package, tmp_path)

    assert state.downloaded_size == package.package_size
    assert state.name == "game_1.3.0.zip"
    assert state.url == package.path
    assert state.decompressed_size == package.size
    assert state.is_complete


def test_partial_tmp_file_counts_its_size(tmp_path: Path) -> None:
    package = full_package("1.3.0", package_size=4096)
    write_file(tmp_path / f"{package.name}_tmp", 1500)

    state = ProgressAccountant().measure(package, tmp_path)

    assert state.downloaded_size == 1500
    assert state.remaining_size == 4096 - 1500


def test_absent_package_counts_zero(tmp_path: Path) -> None:
    state = ProgressAccountant().measure(diff_package("1.2.0", "1.3.0"), tmp_path)
    assert state.downloaded_size == 0


def test_final_file_wins_over_tmp_without_double_counting(tmp_path: Path) -> None:
    package = voice_pack(VoiceLanguage.JAPANESE, "Audio_ja-jp.zip", package_size=900)
    write_file(tmp_path / package.name, 900)
    write_file(tmp_path / f"{package.name}_tmp", 300)

    assert ProgressAccountant().measure(package, tmp_path).downloaded_size == 900


def test_directory_with_package_name_is_not_progress(tmp_path: Path) -> None:
    package = full_package("1.3.0")
    (tmp_path / package.name).mkdir()

    assert ProgressAccountant().measure(package, tmp_path).downloaded_size == 0


def test_segmented_package_sums_segments(tmp_path: Path) -> None:
    package = segmented_package("1.3.0", segment_sizes=(1000, 1000, 500))
    write_file(tmp_path / package.segments[0].name, 1000)
    write_file(tmp_path / f"{package.segments[1].name}_tmp", 400)

    state = ProgressAccountant().measure(package, tmp_path)

    assert state.downloaded_size == 1400
    assert state.package_size == 2500
    assert state.decompressed_size == package.size
    assert state.name == "game_1.3.0.zip"


def test_missing_install_directory_counts_zero(tmp_path: Path) -> None:
    state = ProgressAccountant().measure(full_package("1.3.0"), tmp_path / "not-yet-created")
    assert state.downloaded_size == 0


def test_unreadable_directory_raises_file_system_error(tmp_path: Path) -> None:
    with patch.object(FileSystemService, "get_file_size", side_effect=PermissionError("denied")):
        with pytest.raises(FileSystemError):
            ProgressAccountant().measure(full_package("1.3.0"), tmp_path)


@given(
    st.lists(st.one_of(st.none(), st.tuples(st.booleans(), st.integers(min_value=0, max_value=2000))),
             min_size=1, max_size=4)
)
@settings(deadline=None, max_examples=30)
def test_measure_is_idempotent_and_sums_segments(layout: list[tuple[bool, int] | None]) -> None:
    """Measuring twice without disk changes gives the same answer, equal to the per-segment sum."""
    package = segmented_package("2.0.0", segment_sizes=tuple(2000 for _ in layout))
    accountant = ProgressAccountant()

    with tempfile.TemporaryDirectory() as temp_dir:
        install = Path(temp_dir)
        expected = 0
        for segment, entry in zip(package.segments, layout):
            if entry is None:
                continue
            is_partial, size = entry
            name = f"{segment.name}_tmp" if is_partial else segment.name
            write_file(install / name, size)
            expected += size

        first = accountant.measure(package, install)
        second = accountant.measure(package, install)

        assert first.downloaded_size == second.downloaded_size == expected
        assert first.downloaded_size >= 0
