"""
Data Models Layer.

This package contains the Pydantic models and static tables that define the
core data structures used throughout the package, such as configuration,
data formats and the round catalog.
"""

from .config import DataFormat, ESSConfig
from .rounds import ROUND_CATALOG, Round, get_round, show_rounds

__all__ = [
    "DataFormat",
    "ESSConfig",
    "ROUND_CATALOG",
    "Round",
    "get_round",
    "show_rounds",
]
