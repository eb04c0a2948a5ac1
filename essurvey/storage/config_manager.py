"""
Manages loading and saving of the INI configuration file.
"""

import configparser
import logging
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from essurvey.exceptions import ConfigurationError
from essurvey.models.config import ESSConfig

log = logging.getLogger(__name__)

EMAIL_ENV_VAR = "ESS_EMAIL"


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "essurvey"


def get_config_file() -> Path:
    return get_config_dir() / "config.ini"


class ConfigManager:
    """Handles all operations related to the package's INI config file."""

    def __init__(self, config_file_path: Optional[Path] = None):
        self.config_file_path = Path(config_file_path or get_config_file())
        self._parser = configparser.ConfigParser()

    def load_config(self, overrides: Optional[dict[str, Any]] = None) -> ESSConfig:
        """
        Loads configuration from the INI file, the environment and overrides.

        A missing file is not an error: defaults are used. The ESS_EMAIL
        environment variable takes precedence over the file, and overrides
        take precedence over both.

        Raises:
            ConfigurationError: If the file cannot be parsed or validation fails.
        """
        settings: dict[str, Any] = {}
        if self.config_file_path.is_file():
            try:
                self._parser.read(self.config_file_path, encoding="utf-8")
            except configparser.Error as e:
                raise ConfigurationError(
                    f"Error parsing configuration file: {e}"
                ) from e
            settings.update(self._get_config_as_dict())
        else:
            log.debug(f"No configuration file at '{self.config_file_path}'.")

        env_email = os.getenv(EMAIL_ENV_VAR, "").strip()
        if env_email:
            settings["email"] = env_email

        if overrides:
            settings.update({k: v for k, v in overrides.items() if v is not None})

        try:
            return ESSConfig(**settings)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def save_config(self, config: ESSConfig) -> None:
        """Writes every setting of config to the INI file."""
        parser = configparser.ConfigParser()
        parser["DEFAULT"] = {}

        for key in sorted(ESSConfig.get_ini_keys()):
            value = getattr(config, key)
            if value is None:
                continue
            if isinstance(value, bool):
                parser["DEFAULT"][key] = "true" if value else "false"
            else:
                parser["DEFAULT"][key] = str(value)

        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w", encoding="utf-8") as configfile:
                parser.write(configfile)
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration file: {e}") from e

    def save_email(self, email: str) -> ESSConfig:
        """
        Registers an email for later calls, keeping the other saved settings.

        Returns:
            The updated configuration.
        """
        if not email or "@" not in email:
            raise ConfigurationError(f"'{email}' is not a valid email address.")

        current = self.load_config() if self.config_file_path.is_file() else ESSConfig()
        updated = current.model_copy(update={"email": email.strip()})
        self.save_config(updated)
        log.info(f"Saved email to [dim]{self.config_file_path}[/dim]")
        return updated

    def _get_config_as_dict(self) -> dict[str, Any]:
        """Reads the 'DEFAULT' section of the INI file into a dictionary."""
        section = self._parser["DEFAULT"]
        settings: dict[str, Any] = {}
        if "email" in section:
            settings["email"] = section.get("email")
        if "base_url" in section:
            settings["base_url"] = section.get("base_url")
        if "timeout" in section:
            try:
                settings["timeout"] = section.getfloat("timeout")
            except ValueError as e:
                raise ConfigurationError(f"Invalid timeout in config: {e}") from e
        if "show_progress" in section:
            try:
                settings["show_progress"] = section.getboolean("show_progress")
            except ValueError as e:
                raise ConfigurationError(f"Invalid show_progress in config: {e}") from e
        if "temp_dir" in section:
            settings["temp_dir"] = section.get("temp_dir") or None
        return settings


def load_config(
    config_file_path: Optional[Path] = None, **overrides: Any
) -> ESSConfig:
    """Loads the configuration from the default (or given) INI file."""
    return ConfigManager(config_file_path).load_config(overrides)
