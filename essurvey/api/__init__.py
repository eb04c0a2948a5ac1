"""
ESS Portal Layer.

This package handles all communication with the ESS data portal.
"""

from .auth import ESSAuthenticator
from .client import ESSClient

__all__ = ["ESSAuthenticator", "ESSClient"]
