import os

import pytest

from essurvey.exceptions import ConfigurationError
from essurvey.models.config import DEFAULT_BASE_URL
from essurvey.storage.config_manager import (
    EMAIL_ENV_VAR,
    ConfigManager,
    get_config_dir,
    load_config,
)


@pytest.fixture(autouse=True)
def no_env_email(monkeypatch):
    monkeypatch.delenv(EMAIL_ENV_VAR, raising=False)


@pytest.fixture
def config_file(tmp_path):
    return tmp_path / "essurvey" / "config.ini"


def test_missing_file_gives_defaults(config_file):
    config = ConfigManager(config_file).load_config()

    assert config.email == ""
    assert config.base_url == DEFAULT_BASE_URL
    assert config.timeout == 300.0


def test_reads_settings_from_ini(config_file):
    config_file.parent.mkdir(parents=True)
    config_file.write_text(
        "[DEFAULT]\n"
        "email = someone@example.org\n"
        "base_url = https://mirror.test/\n"
        "timeout = 60\n"
        "show_progress = yes\n",
        encoding="utf-8",
    )

    config = ConfigManager(config_file).load_config()

    assert config.email == "someone@example.org"
    assert config.base_url == "https://mirror.test"
    assert config.timeout == 60.0
    assert config.show_progress is True


def test_environment_and_overrides_take_precedence(config_file, monkeypatch):
    ConfigManager(config_file).save_email("file@example.org")
    monkeypatch.setenv(EMAIL_ENV_VAR, "env@example.org")

    assert ConfigManager(config_file).load_config().email == "env@example.org"
    assert (
        load_config(config_file, email="override@example.org").email
        == "override@example.org"
    )


def test_save_email_round_trips_and_keeps_other_settings(config_file):
    config_file.parent.mkdir(parents=True)
    config_file.write_text("[DEFAULT]\ntimeout = 42\n", encoding="utf-8")

    ConfigManager(config_file).save_email("saved@example.org")
    config = ConfigManager(config_file).load_config()

    assert config.email == "saved@example.org"
    assert config.timeout == 42.0


def test_save_email_rejects_malformed_email(config_file):
    with pytest.raises(ConfigurationError):
        ConfigManager(config_file).save_email("not-an-email")
    assert not config_file.exists()


@pytest.mark.parametrize(
    "content",
    [
        "this is not an ini file",
        "[DEFAULT]\ntimeout = soon\n",
        "[DEFAULT]\nbase_url = ftp://ess.test\n",
    ],
)
def test_invalid_files_raise_configuration_error(config_file, content):
    config_file.parent.mkdir(parents=True)
    config_file.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigurationError):
        ConfigManager(config_file).load_config()


@pytest.mark.skipif(os.name == "nt", reason="APPDATA is used on Windows")
def test_config_dir_honours_xdg(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    assert get_config_dir() == tmp_path / "essurvey"
