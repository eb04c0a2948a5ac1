"""
Pydantic model for package configuration and the data format definitions.
Provides robust validation for all settings.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from essurvey.exceptions import ValidationError

DEFAULT_BASE_URL = "https://www.europeansocialsurvey.org"


class DataFormat(str, Enum):
    """Statistical file formats published by the ESS portal."""

    STATA = "stata"
    SPSS = "spss"
    SAS = "sas"

    @classmethod
    def parse(cls, value: "str | DataFormat") -> "DataFormat":
        """Converts a user supplied string (case-insensitive) to a DataFormat."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(f"'{f.value}'" for f in cls)
            raise ValidationError(
                f"Format '{value}' is not supported. Use one of {valid}."
            ) from None


# Maps each format to its metadata, in the order readers are tried
FORMAT_INFO = {
    DataFormat.STATA: {
        "name": "Stata",
        "extensions": (".dta",),
    },
    DataFormat.SPSS: {
        "name": "SPSS",
        "extensions": (".sav", ".zsav"),
    },
    DataFormat.SAS: {
        "name": "SAS",
        "extensions": (".sas7bdat",),
    },
}

# SAS layouts changed between waves, so only these can be combined into tables
IMPORT_FORMATS = (DataFormat.STATA, DataFormat.SPSS)
DOWNLOAD_FORMATS = tuple(DataFormat)
DEFAULT_DOWNLOAD_FORMAT = DataFormat.STATA


def get_format_info(fmt: DataFormat) -> dict:
    """Gets all information for a given format from the central map."""
    return FORMAT_INFO[fmt]


class ESSConfig(BaseModel):
    """
    A validated configuration model for the package.

    It is passed explicitly to every entry point; there is no process-wide
    "logged in" state.
    """

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    # Authentication
    email: str = ""

    # Portal and transport
    base_url: str = DEFAULT_BASE_URL
    # Total limit for page requests such as the login; archive transfers
    # only bound connecting and stalled reads
    timeout: float = 300.0

    # Local behaviour
    show_progress: bool = False
    temp_dir: Optional[str] = None

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensures the portal URL is http(s) and has no trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout must be a positive number of seconds.")
        return v

    @property
    def login_url(self) -> str:
        return f"{self.base_url}/user/login"

    @property
    def register_url(self) -> str:
        return f"{self.base_url}/user/new"

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        return set(cls.model_fields)
