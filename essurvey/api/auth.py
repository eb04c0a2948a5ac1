"""
Handles authentication with the ESS data portal.

The portal identifies users by their registered email alone. A successful
login leaves a session cookie in the client's cookie jar, which authorizes
the subsequent file downloads.
"""

import asyncio
import html
import logging
import re
from typing import TYPE_CHECKING, Optional

import aiohttp

from essurvey.exceptions import AuthenticationError, NetworkError

if TYPE_CHECKING:
    from .client import ESSClient

log = logging.getLogger(__name__)

_ERROR_NODE_REGEX = re.compile(
    r'<p[^>]*class="[^"]*\berror\b[^"]*"[^>]*>(?P<message>.*?)</p>',
    re.IGNORECASE | re.DOTALL,
)
_TAG_REGEX = re.compile(r"<[^>]+>")


def resolve_email(ess_email: Optional[str], registered_email: str = "") -> str:
    """
    Picks the email to log in with: the explicit argument first, then the
    registered one from the configuration.

    Raises:
        AuthenticationError: If neither is set or the email is malformed.
    """
    email = (ess_email or registered_email or "").strip()
    if not email:
        raise AuthenticationError(
            "No email was provided and none is registered. Pass `ess_email`, "
            "set the ESS_EMAIL environment variable, or save one with "
            "ConfigManager.save_email()."
        )
    if "@" not in email or email.startswith("@") or email.endswith("@"):
        raise AuthenticationError(f"'{email}' is not a valid email address.")
    return email


def extract_login_error(page_html: str) -> Optional[str]:
    """Returns the portal's error message from a login page, if there is one."""
    match = _ERROR_NODE_REGEX.search(page_html)
    if not match:
        return None
    text = _TAG_REGEX.sub("", match.group("message"))
    return " ".join(html.unescape(text).split())


class ESSAuthenticator:
    """
    Manages the login flow for the ESS client.
    """

    def __init__(self, api_client: "ESSClient"):
        """
        Initializes the authenticator.

        Args:
            api_client: A reference to the ESSClient instance that owns the session.
        """
        self._api_client = api_client
        self.email: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.email is not None

    async def authenticate(self, email: str) -> None:
        """
        Logs in to the portal with a registered email.

        Args:
            email: The email the user registered at the ESS website.

        Raises:
            AuthenticationError: If the portal does not know the email.
            NetworkError: If the login page cannot be reached.
        """
        log.info(f"Authenticating as: {email}")
        config = self._api_client.config
        session = await self._api_client.get_session()

        try:
            async with session.post(config.login_url, data={"u": email}) as r:
                r.raise_for_status()
                page_html = await r.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(
                f"Could not reach the ESS login page at {config.login_url}: {e}"
            ) from e

        error_message = extract_login_error(page_html)
        if error_message:
            raise AuthenticationError(
                f"{error_message} Create an account at {config.register_url}"
            )

        self.email = email
        log.debug(f"Session authenticated for {email}.")
