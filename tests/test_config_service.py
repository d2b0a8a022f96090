"""Property-based tests for configuration service."""

import json
import tempfile
from pathlib import Path

import pytest
from hypothesis import given, strategies as st

from gameres.models import AppConfig, GameBiz
from gameres.services import ConfigurationService


# Strategies for generating valid configuration data
valid_log_levels = st.sampled_from(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
valid_timeouts = st.floats(min_value=0.5, max_value=300.0, allow_nan=False, allow_infinity=False)
valid_ttls = st.floats(min_value=0.0, max_value=3600.0, allow_nan=False, allow_infinity=False)

valid_install_paths = st.dictionaries(
    keys=st.sampled_from([biz.value for biz in GameBiz]),
    values=st.builds(
        lambda name: str(Path.home() / "Games" / name),
        st.text(min_size=1, max_size=30, alphabet=st.characters(whitelist_categories=("Lu", "Ll", "Nd"))),
    ),
    max_size=3,
)

valid_config_strategy = st.builds(
    AppConfig,
    log_level=valid_log_levels,
    request_timeout=valid_timeouts,
    cache_ttl=valid_ttls,
    verify_ssl=st.booleans(),
    install_paths=valid_install_paths,
)


@given(valid_config_strategy)
def test_configuration_round_trip(config: AppConfig) -> None:
    """For any valid configuration, saving it and then reloading preserves all values."""
    with tempfile.TemporaryDirectory() as temp_dir:
        config_path = Path(temp_dir) / "test_config.json"
        service = ConfigurationService(config_path)

        service.save_config(config)
        loaded_config = service.load_config()

        assert loaded_config == config


def test_configuration_round_trip_example() -> None:
    config = AppConfig(
        log_level="DEBUG",
        request_timeout=12.5,
        cache_ttl=10.0,
        install_paths={"hk4e_global": str(Path.home() / "Games" / "Genshin Impact")},
    )

    with tempfile.TemporaryDirectory() as temp_dir:
        config_path = Path(temp_dir) / "nested" / "config.json"
        service = ConfigurationService(config_path)

        service.save_config(config)
        loaded_config = service.load_config()

        assert loaded_config.log_level == "DEBUG"
        assert loaded_config.request_timeout == 12.5
        assert loaded_config.install_paths == {"hk4e_global": str(Path.home() / "Games" / "Genshin Impact")}
        assert not list(config_path.parent.glob("*.partial"))


# Configs that construct fine but fail validation
invalid_config_strategy = st.one_of(
    st.builds(AppConfig, log_level=st.text(min_size=1).filter(
        lambda x: x not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])),
    st.builds(AppConfig, request_timeout=st.floats(max_value=0.0, allow_nan=False, allow_infinity=False)),
    st.builds(AppConfig, request_timeout=st.floats(min_value=301.0, max_value=1e6, allow_nan=False)),
    st.builds(AppConfig, cache_ttl=st.floats(max_value=-0.001, allow_nan=False, allow_infinity=False)),
    st.builds(AppConfig, install_paths=st.just({"hk4e_cloud": "/games/cloud"})),
    st.builds(AppConfig, install_paths=st.just({"hkrpg_cn": "relative/StarRail"})),
)


@given(invalid_config_strategy)
def test_configuration_validation_rejects_invalid(config: AppConfig) -> None:
    """Invalid configurations are rejected with error messages."""
    service = ConfigurationService()
    result = service.validate_config(config)

    assert not result.is_valid
    assert len(result.errors) > 0
    assert all(isinstance(error, str) for error in result.errors)


@given(valid_config_strategy)
def test_configuration_validation_accepts_valid(config: AppConfig) -> None:
    service = ConfigurationService()
    result = service.validate_config(config)

    assert result.is_valid
    assert len(result.errors) == 0


def test_missing_file_yields_defaults(tmp_path: Path) -> None:
    assert ConfigurationService(tmp_path / "absent.json").load_config() == AppConfig()


def test_corrupt_file_yields_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text("{not json", encoding="utf-8")

    assert ConfigurationService(config_path).load_config() == AppConfig()


def test_invalid_values_yield_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"log_level": "LOUD"}), encoding="utf-8")

    assert ConfigurationService(config_path).load_config() == AppConfig()


def test_save_rejects_invalid_configuration(tmp_path: Path) -> None:
    service = ConfigurationService(tmp_path / "config.json")

    with pytest.raises(ValueError, match="request_timeout"):
        service.save_config(AppConfig(request_timeout=-1))
    assert not (tmp_path / "config.json").exists()


def test_install_path_set_and_cleared() -> None:
    service = ConfigurationService()
    path = Path.home() / "Games" / "StarRail"

    config = service.with_install_path(AppConfig(), GameBiz.HKRPG_GLOBAL, path)
    assert service.get_install_path(config, GameBiz.HKRPG_GLOBAL) == path
    assert service.get_install_path(config, GameBiz.HKRPG_CN) is None

    cleared = service.with_install_path(config, GameBiz.HKRPG_GLOBAL, None)
    assert service.get_install_path(cleared, GameBiz.HKRPG_GLOBAL) is None
    # The original is untouched
    assert service.get_install_path(config, GameBiz.HKRPG_GLOBAL) == path
