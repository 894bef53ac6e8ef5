from __future__ import annotations

import json
from pathlib import Path

import pytest
import typer
from pydantic import ValidationError

from baserow_bindings.config import CLOUD_URL, FieldFetchPolicy, Settings, get_settings
from baserow_bindings.domain.models import DatabaseConfig
from baserow_bindings.errors import ConfigurationError
from baserow_bindings.infrastructure.http_factory import build_headers
from baserow_bindings.infrastructure.urls import UrlBuilder, lookup_params
from baserow_bindings.main import parse_database_option


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_settings_defaults(workdir: Path) -> None:
    settings = Settings()

    assert settings.token == ""
    assert settings.base_url == CLOUD_URL
    assert settings.target_directory == Path("bindings")
    assert settings.databases == []
    assert settings.fetch_concurrency == 1
    assert settings.on_field_fetch_failure is FieldFetchPolicy.SKIP
    assert settings.json_logs is False


def test_settings_from_environment(workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BASEROW_TOKEN", "secret-token")
    monkeypatch.setenv("BASEROW_DATABASES", '[{"name": "Shop", "id": 1}]')
    monkeypatch.setenv("BASEROW_ON_FIELD_FETCH_FAILURE", "abort")

    settings = Settings()

    assert settings.token == "secret-token"
    assert settings.databases == [DatabaseConfig(name="Shop", id=1)]
    assert settings.on_field_fetch_failure is FieldFetchPolicy.ABORT


def test_settings_from_json_file(workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (workdir / "baserow_config.json").write_text(
        json.dumps(
            {
                "token": "from-file",
                "target_directory": "out",
                "databases": [{"name": "CRM", "id": 2}],
            }
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv("BASEROW_TOKEN", "from-env")

    settings = Settings()

    assert settings.token == "from-env"
    assert settings.target_directory == Path("out")
    assert settings.databases[0].id == 2


def test_settings_validation(workdir: Path) -> None:
    with pytest.raises(ValidationError):
        Settings(fetch_concurrency=0)
    with pytest.raises(ValidationError):
        Settings(http_timeout_seconds=0)


def test_masked_token() -> None:
    assert Settings(token="abcdefgh").masked_token == "abcd****"
    assert Settings(token="abc").masked_token == "***"


def test_get_settings_is_cached(workdir: Path) -> None:
    assert get_settings() is get_settings()


def test_url_builder_joins_relative_to_base() -> None:
    urls = UrlBuilder("https://rows.example.test/baserow")

    assert str(urls.records_url(5)) == "https://rows.example.test/baserow/api/database/rows/table/5/"
    assert str(urls.record_url(5, 9)) == (
        "https://rows.example.test/baserow/api/database/rows/table/5/9/"
    )
    assert str(urls.table_fields_url(5)) == (
        "https://rows.example.test/baserow/api/database/fields/table/5/"
    )
    assert str(UrlBuilder().tables_url()) == "https://api.baserow.io/api/database/tables/all-tables/"


@pytest.mark.parametrize("base_url", ["ftp://baserow.test/", "baserow.test", "https://"])
def test_url_builder_rejects_invalid_base(base_url: str) -> None:
    with pytest.raises(ConfigurationError):
        UrlBuilder(base_url)


def test_lookup_params_and_headers() -> None:
    assert lookup_params("field_12", "Ada") == {"filter__field_12__equal": "Ada"}
    assert build_headers("t0k") == {"Authorization": "Token t0k", "Accept": "application/json"}


def test_parse_database_option() -> None:
    assert parse_database_option("Shop=42") == DatabaseConfig(name="Shop", id=42)
    assert parse_database_option(" Sales = 7") == DatabaseConfig(name="Sales", id=7)
    assert parse_database_option("A=B=3") == DatabaseConfig(name="A=B", id=3)


@pytest.mark.parametrize("value", ["Shop", "Shop=", "=4", "Shop=four"])
def test_parse_database_option_rejects(value: str) -> None:
    with pytest.raises(typer.BadParameter):
        parse_database_option(value)
