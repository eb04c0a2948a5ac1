"""
The orchestrator for a single import or download call.
"""

import asyncio
import logging
import shutil
import tempfile
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Awaitable, List, Optional, TypeVar

import pandas as pd

from essurvey.api.client import ESSClient
from essurvey.data.extractor import extract_archive
from essurvey.data.reader import read_round_data
from essurvey.models.config import DataFormat, ESSConfig

from .resolver import RoundDownload

log = logging.getLogger(__name__)

T = TypeVar("T")


def run_sync(coro: Awaitable[T]) -> T:
    """
    Runs a coroutine to completion and returns its result.

    Inside an already running event loop (e.g. a notebook) the coroutine gets
    its own loop on a worker thread; the caller still blocks until it is done.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    with ThreadPoolExecutor(max_workers=1) as pool:
        return pool.submit(asyncio.run, coro).result()


class RoundManager:
    """Runs login, download, extraction and reading for one call."""

    def __init__(self, config: ESSConfig):
        self.config = config

    async def fetch(
        self, downloads: List[RoundDownload], email: str, target_dir: Path
    ) -> List[Path]:
        """Logs in and downloads every archive into target_dir, in order."""
        async with ESSClient(self.config) as client:
            await client.authenticate(email)
            return await client.download_rounds(downloads, target_dir)

    def download(
        self, downloads: List[RoundDownload], email: str, target_dir: Path
    ) -> List[Path]:
        return run_sync(self.fetch(downloads, email, target_dir))

    def import_tables(
        self,
        downloads: List[RoundDownload],
        email: str,
        read_format: Optional[DataFormat] = None,
    ) -> List[pd.DataFrame]:
        """
        Downloads the rounds to a temporary directory and reads them into tables.

        The temporary directory is removed whether or not the call succeeds.
        """
        work_dir = self._make_work_dir()
        try:
            archives = self.download(downloads, email, work_dir)
            tables = []
            for download, archive in zip(downloads, archives):
                data_dir = extract_archive(archive)
                table = read_round_data(data_dir, read_format)
                table.attrs["round"] = download.round.number
                tables.append(table)
            return tables
        finally:
            self._cleanup(work_dir)

    def _make_work_dir(self) -> Path:
        parent = None
        if self.config.temp_dir:
            parent = Path(self.config.temp_dir)
            parent.mkdir(parents=True, exist_ok=True)
        work_dir = Path(tempfile.mkdtemp(prefix="essurvey_", dir=parent))
        log.debug(f"Working directory: {work_dir}")
        return work_dir

    @staticmethod
    def _cleanup(work_dir: Path) -> None:
        shutil.rmtree(work_dir, ignore_errors=True)
        if work_dir.exists():
            log.warning(
                f"[yellow]Could not remove temporary directory {work_dir}[/yellow]"
            )
        else:
            log.debug(f"Removed temporary directory {work_dir}")
