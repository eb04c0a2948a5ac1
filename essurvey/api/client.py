"""
Async client for the ESS data portal: one authenticated session per call.
"""

import logging
from pathlib import Path
from typing import List, Optional

import aiohttp

from essurvey.core.resolver import RoundDownload
from essurvey.data.downloader import Downloader
from essurvey.exceptions import AuthenticationError
from essurvey.models.config import ESSConfig

from .auth import ESSAuthenticator

log = logging.getLogger(__name__)


class ESSClient:
    """
    Owns the aiohttp session shared by the login and the file downloads.

    Use it as an async context manager so the session is always closed:

        async with ESSClient(config) as client:
            await client.authenticate(email)
            paths = await client.download_rounds(downloads, target_dir)
    """

    USER_AGENT = "essurvey-python (+https://www.europeansocialsurvey.org)"

    def __init__(self, config: ESSConfig):
        self.config = config
        self._session: Optional[aiohttp.ClientSession] = None
        self._authenticator = ESSAuthenticator(self)
        self._downloader = Downloader(show_progress=config.show_progress)

    @property
    def authenticator(self) -> ESSAuthenticator:
        """Provides access to the authentication helper."""
        return self._authenticator

    async def get_session(self) -> aiohttp.ClientSession:
        """Ensures an active aiohttp session with a cookie jar is available."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": self.USER_AGENT},
                timeout=aiohttp.ClientTimeout(total=self.config.timeout),
            )
        return self._session

    async def close(self) -> None:
        """Gracefully closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "ESSClient":
        await self.get_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def authenticate(self, email: str) -> None:
        await self._authenticator.authenticate(email)

    async def download_rounds(
        self, downloads: List[RoundDownload], target_dir: Path
    ) -> List[Path]:
        """
        Downloads the archive of every round, one after the other, into target_dir.

        Raises:
            AuthenticationError: If called before a successful login.
        """
        if not self._authenticator.is_authenticated:
            raise AuthenticationError("Log in before downloading any round.")

        session = await self.get_session()
        saved = []
        for download in downloads:
            log.info(
                f"Downloading ESS round {download.round.number} "
                f"([cyan]{download.format.value}[/cyan])..."
            )
            destination = target_dir / download.archive_name
            saved.append(
                await self._downloader.download_file(session, download.url, destination)
            )
        return saved
