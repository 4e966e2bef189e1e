from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from pidsync.config import (
    DEFAULT_REPAIR_IDENTITY,
    LOG_LEVEL_ENV,
    ConfigurationError,
    MissingConfigurationError,
    configure_logging,
    get_database_config,
    get_datacite_config,
    get_storage_config,
    get_sync_config,
    optional_env_var,
    require_env_vars,
    resolve_log_level,
)

if TYPE_CHECKING:
    from collections.abc import Iterator


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", " value ")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_lists_every_missing_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_B", raising=False)
    monkeypatch.setenv("MISSING_A", "   ")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_B", "MISSING_A"])

    assert "MISSING_A, MISSING_B" in str(exc.value)


def test_optional_env_var_treats_blank_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "  ")

    assert optional_env_var("EXAMPLE_VAR") is None


def test_sync_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PIDSYNC_DOI_PREFIX", "10.5072")
    for name in ("PIDSYNC_REPAIR_IDENTITY", "PIDSYNC_REPAIR_EXECUTOR", "PIDSYNC_EXPORT_DIR"):
        monkeypatch.delenv(name, raising=False)

    config = get_sync_config()

    assert config.own_prefix == "10.5072"
    assert config.repair_identity == DEFAULT_REPAIR_IDENTITY
    assert config.repair_executor is None
    assert config.export_dir == Path()


def test_sync_config_requires_prefix(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PIDSYNC_DOI_PREFIX", raising=False)

    with pytest.raises(MissingConfigurationError):
        get_sync_config()


def test_sync_config_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("PIDSYNC_DOI_PREFIX", "10.15468")
    monkeypatch.setenv("PIDSYNC_REPAIR_IDENTITY", "registry.admin")
    monkeypatch.setenv("PIDSYNC_REPAIR_EXECUTOR", "registry")
    monkeypatch.setenv("PIDSYNC_EXPORT_DIR", str(tmp_path))

    config = get_sync_config()

    assert config.repair_identity == "registry.admin"
    assert config.repair_executor == "registry"
    assert config.export_dir == tmp_path


def test_datacite_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATACITE_USERNAME", "GBIF.TEST")
    monkeypatch.setenv("DATACITE_PASSWORD", "secret")
    monkeypatch.setenv("DATACITE_API_URL", "https://api.test.datacite.org/")

    config = get_datacite_config()

    assert config.username == "GBIF.TEST"
    assert config.resilience.base_url == "https://api.test.datacite.org"
    assert config.resilience.default_headers == {"Accept": "application/vnd.api+json"}


def test_datacite_config_requires_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DATACITE_USERNAME", raising=False)
    monkeypatch.delenv("DATACITE_PASSWORD", raising=False)

    with pytest.raises(MissingConfigurationError):
        get_datacite_config()


def test_database_uri_prefers_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "postgresql+psycopg://registry@db/registry")

    assert get_database_config().uri == "postgresql+psycopg://registry@db/registry"


def test_database_uri_falls_back_to_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.setenv("PIDSYNC_DATA_DIR", str(tmp_path))

    uri = get_database_config().uri

    assert uri == f"sqlite+pysqlite:///{tmp_path.resolve() / 'pidsync.db'}"
    assert get_storage_config().data_dir == tmp_path


@pytest.fixture
def restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    httpx_level = logging.getLogger("httpx").level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("httpx").setLevel(httpx_level)


@pytest.mark.parametrize(("raw", "expected"), [(None, logging.INFO), (" debug ", logging.DEBUG)])
def test_resolve_log_level(
    monkeypatch: pytest.MonkeyPatch, raw: str | None, expected: int
) -> None:
    if raw is None:
        monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    else:
        monkeypatch.setenv(LOG_LEVEL_ENV, raw)

    assert resolve_log_level() == expected


def test_resolve_log_level_rejects_unknown_names(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(LOG_LEVEL_ENV, "chatty")

    with pytest.raises(ConfigurationError, match="chatty"):
        resolve_log_level()


@pytest.mark.usefixtures("restore_logging")
def test_configure_logging_keeps_http_client_quiet(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(LOG_LEVEL_ENV, "INFO")

    configure_logging(force=True)

    assert logging.getLogger().level == logging.INFO
    assert logging.getLogger("httpx").level == logging.WARNING

    configure_logging(level=logging.DEBUG, force=True)

    assert logging.getLogger("httpx").level == logging.DEBUG


@pytest.mark.usefixtures("restore_logging")
def test_configure_logging_falls_back_on_unknown_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(LOG_LEVEL_ENV, "chatty")

    configure_logging(force=True)

    assert logging.getLogger().level == logging.INFO
