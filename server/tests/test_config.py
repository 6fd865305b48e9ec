"""Tests for opal.config — environment-bound settings."""

from __future__ import annotations

import pathlib

import pydantic
import pytest

from opal import config


class TestSettings:
    def test_defaults(self, monkeypatch) -> None:
        for name in (
            "ENVIRONMENT",
            "WRITE_TO_FILE",
            "OPAL_MAX_BATCH_FILES",
            "OPAL_MAX_FILE_SIZE",
            "OPAL_MAX_CONCURRENCY",
            "OPAL_TABLES_DIR",
        ):
            monkeypatch.delenv(name, raising=False)
        settings = config.Settings()
        assert settings.max_batch_files == 10
        assert settings.max_file_size == 100 * 1024 * 1024
        assert settings.max_concurrency == 4
        assert settings.tables_dir is None
        assert settings.is_production is False

    def test_reads_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("OPAL_MAX_BATCH_FILES", "3")
        monkeypatch.setenv("OPAL_TABLES_DIR", "/srv/tables")
        settings = config.Settings()
        assert settings.is_production is True
        assert settings.max_batch_files == 3
        assert settings.tables_dir == pathlib.Path("/srv/tables")

    def test_rejects_zero_batch_size(self, monkeypatch) -> None:
        monkeypatch.setenv("OPAL_MAX_BATCH_FILES", "0")
        with pytest.raises(pydantic.ValidationError):
            config.Settings()

    def test_cached(self) -> None:
        assert config.get_settings() is config.get_settings()
