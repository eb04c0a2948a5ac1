"""
essurvey: download data from the European Social Survey.
"""

import logging

from essurvey.core.resolver import round_urls
from essurvey.exceptions import (
    ArchiveError,
    AuthenticationError,
    ConfigurationError,
    ESSurveyError,
    NetworkError,
    ParseError,
    ValidationError,
)
from essurvey.models.config import DataFormat, ESSConfig
from essurvey.models.rounds import get_round, show_rounds
from essurvey.rounds import download_rounds, import_all_rounds, import_rounds
from essurvey.storage.config_manager import ConfigManager, load_config
from essurvey.utils.log_setup import setup_logging

__version__ = "1.0.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ArchiveError",
    "AuthenticationError",
    "ConfigManager",
    "ConfigurationError",
    "DataFormat",
    "ESSConfig",
    "ESSurveyError",
    "NetworkError",
    "ParseError",
    "ValidationError",
    "download_rounds",
    "get_round",
    "import_all_rounds",
    "import_rounds",
    "load_config",
    "round_urls",
    "setup_logging",
    "show_rounds",
]
