"""
Unpacks downloaded round archives.
"""

import logging
import zipfile
from pathlib import Path
from typing import Optional

from essurvey.exceptions import ArchiveError

log = logging.getLogger(__name__)


def default_extract_dir(archive_path: Path) -> Path:
    """The working directory next to an archive: its path without '.zip'."""
    if archive_path.suffix.lower() == ".zip":
        return archive_path.with_suffix("")
    return archive_path.with_name(archive_path.name + "_files")


def extract_archive(archive_path: Path, destination: Optional[Path] = None) -> Path:
    """
    Extracts a zip archive into destination, or an adjacent directory.

    Args:
        archive_path: The downloaded zip file.
        destination: Where to put the members. Defaults to default_extract_dir.

    Returns:
        The directory holding the extracted files.

    Raises:
        ArchiveError: If the file is not a zip archive, is corrupt or is empty.
    """
    archive_path = Path(archive_path)
    target_dir = Path(destination) if destination else default_extract_dir(archive_path)

    if not zipfile.is_zipfile(archive_path):
        raise ArchiveError(f"'{archive_path.name}' is not a zip archive.")

    try:
        with zipfile.ZipFile(archive_path) as archive:
            members = [m for m in archive.namelist() if not m.endswith("/")]
            if not members:
                raise ArchiveError(f"'{archive_path.name}' contains no files.")
            corrupt_member = archive.testzip()
            if corrupt_member:
                raise ArchiveError(
                    f"'{archive_path.name}' is corrupt: bad CRC for '{corrupt_member}'."
                )
            target_dir.mkdir(parents=True, exist_ok=True)
            archive.extractall(target_dir)
    except zipfile.BadZipFile as e:
        raise ArchiveError(f"'{archive_path.name}' is corrupt: {e}") from e

    log.info(
        f"Extracted {len(members)} file(s) from [dim]{archive_path.name}[/dim]"
    )
    return target_dir
