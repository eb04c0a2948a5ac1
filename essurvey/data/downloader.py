"""
Handles the low-level downloading of data archives over HTTP.

Downloads are streamed to a ".part" file next to the destination, which
replaces the destination only once the transfer is complete. There is no
retry: a failed transfer removes its partial file, leaves any earlier copy of
the destination untouched and surfaces a NetworkError so the caller can
re-invoke.
"""

import asyncio
import logging
from contextlib import nullcontext, suppress
from pathlib import Path

import aiofiles
import aiohttp
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TextColumn,
    TransferSpeedColumn,
)

from essurvey.exceptions import AuthenticationError, NetworkError

log = logging.getLogger(__name__)


def _create_progress() -> Progress:
    return Progress(
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        DownloadColumn(),
        TransferSpeedColumn(),
        transient=True,
    )


class Downloader:
    """A sequential file downloader that streams responses to disk."""

    CHUNK_SIZE = 262144  # 256 KB
    PARTIAL_SUFFIX = ".part"
    # No total limit for archive bodies, only for connecting and stalled reads
    TRANSFER_TIMEOUT = aiohttp.ClientTimeout(total=None, sock_connect=15, sock_read=90)

    def __init__(self, show_progress: bool = False):
        self.show_progress = show_progress

    async def download_file(
        self,
        session: aiohttp.ClientSession,
        url: str,
        destination_path: Path,
    ) -> Path:
        """
        Downloads a file from a URL to destination_path.

        Raises:
            AuthenticationError: If the portal answers with an HTML page, which
                it does when the session is not logged in.
            NetworkError: On transport failures or HTTP error statuses.
        """
        log.debug(f"GET {url}")
        partial_path = self.partial_path(destination_path)
        try:
            async with session.get(
                url, allow_redirects=True, timeout=self.TRANSFER_TIMEOUT
            ) as response:
                response.raise_for_status()

                if response.content_type == "text/html":
                    raise AuthenticationError(
                        f"The ESS portal returned a web page instead of "
                        f"'{destination_path.name}'. The session is not authorized "
                        "to download this file."
                    )

                total_size = response.content_length
                progress_cm = _create_progress() if self.show_progress else nullcontext()
                with progress_cm as progress:
                    task_id = (
                        progress.add_task(destination_path.name, total=total_size)
                        if progress is not None
                        else None
                    )
                    async with aiofiles.open(partial_path, "wb") as f:
                        async for chunk in response.content.iter_chunked(
                            self.CHUNK_SIZE
                        ):
                            await f.write(chunk)
                            if progress is not None:
                                progress.update(task_id, advance=len(chunk))
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._remove_partial(partial_path)
            raise NetworkError(f"Failed to download {url}: {e}") from e
        except BaseException:
            self._remove_partial(partial_path)
            raise

        partial_path.replace(destination_path)
        log.info(f"Downloaded [dim]{destination_path.name}[/dim]")
        return destination_path

    @classmethod
    def partial_path(cls, destination_path: Path) -> Path:
        return destination_path.with_name(destination_path.name + cls.PARTIAL_SUFFIX)

    @staticmethod
    def _remove_partial(path: Path) -> None:
        with suppress(FileNotFoundError):
            path.unlink()
