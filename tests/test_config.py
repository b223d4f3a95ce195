"""Tests for environment based configuration and the service facade."""

import os
from pathlib import Path
from typing import Iterator
from unittest import mock

import pytest

from oeradio.adapters.callsign import (
    CallsignAdapter,
    get_callsign_adapter,
    reset_callsign_adapter,
)
from oeradio.config import CallsignConfig

ENV_VARS = (
    "OERADIO_DATA_PATH",
    "QRZ_USERNAME",
    "QRZ_PASSWORD",
    "HAMQTH_USERNAME",
    "HAMQTH_PASSWORD",
    "CALLSIGN_CACHE_ENABLED",
    "CALLSIGN_CACHE_TTL",
    "CALLSIGN_DB_CACHE_TTL",
    "CALLSIGN_REQUEST_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_env() -> Iterator[None]:
    """Run every test without the service variables set."""
    env = {k: v for k, v in os.environ.items() if k not in ENV_VARS}
    with mock.patch.dict(os.environ, env, clear=True):
        yield


class TestFromEnv:
    """Tests for CallsignConfig.from_env."""

    def test_defaults(self) -> None:
        """Test defaults without environment variables."""
        config = CallsignConfig.from_env()
        assert config.data_path == "data/callsigns_oe.json"
        assert config.cache_enabled
        assert config.cache_ttl == 3600
        assert config.database_cache_ttl == 300
        assert config.qrz_username is None

    def test_environment_variables(self) -> None:
        """Test configuration from environment variables."""
        env_vars = {
            "OERADIO_DATA_PATH": "/srv/callsigns.json",
            "QRZ_USERNAME": "oe8yml",
            "QRZ_PASSWORD": "secret",
            "CALLSIGN_CACHE_ENABLED": "off",
            "CALLSIGN_CACHE_TTL": "60",
        }
        with mock.patch.dict(os.environ, env_vars):
            config = CallsignConfig.from_env()
        assert config.data_path == "/srv/callsigns.json"
        assert CallsignAdapter(config).qrz.is_configured()
        assert not config.cache_enabled
        assert config.cache_ttl == 60

    def test_bad_number_falls_back(self) -> None:
        """Test unparsable numbers keep the default."""
        with mock.patch.dict(os.environ, {"CALLSIGN_REQUEST_TIMEOUT": "soon", "CALLSIGN_CACHE_TTL": ""}):
            config = CallsignConfig.from_env()
        assert config.request_timeout == 10
        assert config.cache_ttl == 3600

    def test_empty_credentials_ignored(self) -> None:
        """Test an empty password leaves QRZ.com unconfigured."""
        with mock.patch.dict(os.environ, {"QRZ_USERNAME": "oe8yml", "QRZ_PASSWORD": ""}):
            config = CallsignConfig.from_env()
        assert config.qrz_password is None
        assert not CallsignAdapter(config).qrz.is_configured()


class TestAdapter:
    """Tests for the CallsignAdapter facade and its global instance."""

    def test_sources_wired_from_config(self, tmp_path: Path) -> None:
        """Test QRZ.com needs credentials while HamQTH works anonymously."""
        adapter = CallsignAdapter(CallsignConfig(data_path=str(tmp_path / "db.json")))
        assert not adapter.qrz.is_configured()
        assert adapter.hamqth.is_configured()
        assert not adapter.hamqth.has_credentials
        assert adapter.engine.external_sources == [adapter.qrz, adapter.hamqth]

    def test_cache_settings_passed_on(self, tmp_path: Path) -> None:
        """Test the engine receives the cache settings."""
        config = CallsignConfig(data_path=str(tmp_path / "db.json"), cache_enabled=False, cache_ttl=5)
        stats = CallsignAdapter(config).engine.cache_stats()
        assert stats == {"size": 0, "enabled": False, "ttl": 5}

    def test_global_instance(self, database_path: Path) -> None:
        """Test the global adapter is built once from the environment."""
        reset_callsign_adapter()
        try:
            with mock.patch.dict(os.environ, {"OERADIO_DATA_PATH": str(database_path)}):
                adapter = get_callsign_adapter()
            assert get_callsign_adapter() is adapter
            assert adapter.get_database_info().count == 5
        finally:
            reset_callsign_adapter()

    def test_reload(self, database_path: Path) -> None:
        """Test reload drops the lookup cache."""
        adapter = CallsignAdapter(CallsignConfig(data_path=str(database_path)))
        adapter.engine.configure(external_sources=[])
        assert adapter.search("OE1*")
        adapter.reload()
        assert adapter.engine.cache_stats()["size"] == 0
        assert adapter.validate("OE8YML").valid
