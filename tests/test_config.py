from pathlib import Path

import pytest
import yaml

from wingetctl.config import ConfigManager
from wingetctl.exceptions import ConfigError
from wingetctl.main import create_services
from wingetctl.models.config import AppConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "WINGETCTL_WINGET_EXECUTABLE",
        "WINGETCTL_WINGET_QUERY_TIMEOUT",
        "WINGETCTL_WINGET_PROBE_TIMEOUT",
        "WINGETCTL_LOG_LEVEL",
        "WINGETCTL_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    config = ConfigManager(tmp_path / "config.yaml").load()

    assert config.winget.executable is None
    assert config.winget.query_timeout == 300.0
    assert config.winget.probe_timeout == 5.0
    assert config.logging.level == "INFO"


def test_yaml_values_are_loaded(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        "winget:\n"
        "  executable: 'C:\\tools\\winget.exe'\n"
        "  query_timeout: 0\n"
        "classifier:\n"
        "  extra_success_phrases:\n"
        "    install: ['Erfolgreich installiert']\n",
        encoding="utf-8",
    )

    config = ConfigManager(path).load()

    assert config.winget.executable == "C:\\tools\\winget.exe"
    assert config.winget.query_timeout is None
    assert config.classifier.extra_success_phrases == {"install": ["Erfolgreich installiert"]}


def test_env_overrides_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("logging:\n  level: INFO\n", encoding="utf-8")
    monkeypatch.setenv("WINGETCTL_WINGET_EXECUTABLE", "/opt/winget")
    monkeypatch.setenv("WINGETCTL_WINGET_QUERY_TIMEOUT", "12.5")
    monkeypatch.setenv("WINGETCTL_LOG_LEVEL", "debug")
    monkeypatch.setenv("WINGETCTL_LOG_FORMAT", "xml")

    config = ConfigManager(path).load()

    assert config.winget.executable == "/opt/winget"
    assert config.winget.query_timeout == 12.5
    assert config.logging.level == "DEBUG"
    assert config.logging.format == "json"


def test_invalid_yaml_raises_config_error(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("winget: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        ConfigManager(path).load()


def test_schema_violation_raises_config_error(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("logging:\n  level: LOUD\n", encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        ConfigManager(path).load()
    assert str(path) in str(excinfo.value)


def test_save_round_trips_through_yaml(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "config.yaml"
    manager = ConfigManager(path)
    config = AppConfig()
    config.winget.probe_timeout = 9.0

    manager.save(config)

    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert data["winget"]["probe_timeout"] == 9.0
    assert "executable" not in data["winget"]
    assert manager.reload().winget.probe_timeout == 9.0


def test_create_services_wires_config() -> None:
    config = AppConfig()
    config.winget.executable = "/opt/winget"
    config.winget.query_timeout = 7.0
    config.winget.probe_timeout = 1.5

    services = create_services(config)

    assert services.runner.executable == "/opt/winget"
    assert services.runner.probe_timeout == 1.5
    assert services.winget.query_timeout == 7.0


def test_non_positive_probe_timeout_falls_back_to_default(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("winget:\n  probe_timeout: 0\n", encoding="utf-8")

    assert ConfigManager(path).load().winget.probe_timeout == 5.0

    path.write_text("winget:\n  probe_timeout: 2\n", encoding="utf-8")
    monkeypatch.setenv("WINGETCTL_WINGET_PROBE_TIMEOUT", "-1")

    assert ConfigManager(path).load().winget.probe_timeout == 2.0
