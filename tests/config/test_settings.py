from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest

from feedsync.config import (
    ConfigurationError,
    ReprocessingConfig,
    StorageConfig,
    get_database_config,
    get_reprocessing_config,
    get_storage_config,
    positive_int_env,
)
from feedsync.config import storage
from feedsync.domain import reprocessing


def test_positive_int_env_falls_back_when_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FEEDSYNC_TEST_VALUE", raising=False)
    assert positive_int_env("FEEDSYNC_TEST_VALUE", 7) == 7

    monkeypatch.setenv("FEEDSYNC_TEST_VALUE", "  ")
    assert positive_int_env("FEEDSYNC_TEST_VALUE", 7) == 7

    monkeypatch.setenv("FEEDSYNC_TEST_VALUE", "12")
    assert positive_int_env("FEEDSYNC_TEST_VALUE", 7) == 12


@pytest.mark.parametrize("raw", ["zero", "0", "-3", "1.5"])
def test_positive_int_env_rejects_bad_values(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("FEEDSYNC_TEST_VALUE", raw)

    with pytest.raises(ConfigurationError, match="FEEDSYNC_TEST_VALUE"):
        positive_int_env("FEEDSYNC_TEST_VALUE", 7)


def test_reprocessing_config_reads_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FEEDSYNC_REPROCESS_BATCH_SIZE", raising=False)
    monkeypatch.delenv("FEEDSYNC_REPROCESS_MAX_WORKERS", raising=False)
    assert get_reprocessing_config() == ReprocessingConfig()

    monkeypatch.setenv("FEEDSYNC_REPROCESS_BATCH_SIZE", "200")
    monkeypatch.setenv("FEEDSYNC_REPROCESS_MAX_WORKERS", "1")
    assert get_reprocessing_config() == ReprocessingConfig(batch_size=200, max_workers=1)


def test_storage_config_prefers_explicit_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("FEEDSYNC_DATA_DIR", str(custom))

    config = get_storage_config()

    assert config.data_dir == custom.resolve()
    assert config.database_file == custom.resolve() / storage.DATABASE_FILENAME


def test_database_config_uses_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite:///override.db")

    assert get_database_config().uri == "sqlite:///override.db"


def test_database_config_creates_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)

    config = get_database_config(storage=StorageConfig(data_dir=tmp_path / "data-dir"))

    expected_path = (tmp_path / "data-dir" / storage.DATABASE_FILENAME).resolve()
    assert config.uri == f"sqlite+pysqlite:///{expected_path}"
    assert expected_path.parent.exists()


def test_reprocessing_defaults_match_the_orchestrator() -> None:
    config = ReprocessingConfig()

    assert config.batch_size == reprocessing.DEFAULT_BATCH_SIZE
    assert config.max_workers == reprocessing.DEFAULT_MAX_WORKERS
