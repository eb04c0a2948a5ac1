"""
Reads extracted ESS data files into pandas DataFrames.

Readers are kept in an explicit, ordered tuple. When no format is requested
they are attempted in that order and every attempt is recorded, so a failure
reports exactly which formats and files were tried.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

import pandas as pd
import pyreadstat

from essurvey.exceptions import ParseError
from essurvey.models.config import DataFormat, get_format_info

log = logging.getLogger(__name__)

# Edition tags follow the round prefix: 'e06_6' in 'ESS1e06_6.dta'
_EDITION_REGEX = re.compile(
    r"ESS\d+[A-Za-z]*?(?P<tag>e(?P<major>\d+)(?:_(?P<minor>\d+))?)"
)


def edition_tag(path: Path) -> Optional[str]:
    """Returns the edition tag in a file name, e.g. 'e06_6', or None."""
    match = _EDITION_REGEX.search(path.stem)
    return match.group("tag") if match else None


def edition_key(path: Path) -> Tuple[int, int, int]:
    """
    Sort key for the edition of a data file.

    Tagged files compare by (major, minor) numerically; a missing minor counts
    as 0. Untagged files rank below every tagged one.
    """
    match = _EDITION_REGEX.search(path.stem)
    if not match:
        return (0, 0, 0)
    return (1, int(match.group("major")), int(match.group("minor") or 0))


def latest_version(files: Iterable[Path]) -> Path:
    """Picks the most recent edition; ties go to the greatest file name."""
    return max(files, key=lambda p: (edition_key(p), p.name))


def _read_stata(path: Path) -> pd.DataFrame:
    with pd.read_stata(path, iterator=True, convert_categoricals=False) as reader:
        table = reader.read()
        variable_labels = reader.variable_labels()
        value_labels = reader.value_labels()
    table.attrs["variable_labels"] = variable_labels
    table.attrs["value_labels"] = value_labels
    return table


def _read_spss(path: Path) -> pd.DataFrame:
    table, meta = pyreadstat.read_sav(str(path))
    table.attrs["variable_labels"] = dict(meta.column_names_to_labels)
    table.attrs["value_labels"] = dict(meta.variable_value_labels)
    return table


def _read_sas(path: Path) -> pd.DataFrame:
    table, meta = pyreadstat.read_sas7bdat(str(path))
    table.attrs["variable_labels"] = dict(meta.column_names_to_labels)
    table.attrs["value_labels"] = {}
    return table


@dataclass(frozen=True)
class ReadAttempt:
    """The outcome of trying one reader on one directory."""

    format: DataFormat
    path: Optional[Path] = None
    table: Optional[pd.DataFrame] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.table is not None

    def describe(self) -> str:
        if self.path is None:
            return f"{self.format.value} (no file found)"
        if self.succeeded:
            return f"{self.format.value} ('{self.path.name}': ok)"
        return f"{self.format.value} ('{self.path.name}': {self.error})"


@dataclass(frozen=True)
class FormatReader:
    """Knows which files belong to a format and how to parse them."""

    format: DataFormat
    parse: Callable[[Path], pd.DataFrame]

    @property
    def extensions(self) -> Tuple[str, ...]:
        return get_format_info(self.format)["extensions"]

    def find_files(self, directory: Path) -> List[Path]:
        return sorted(
            p
            for p in Path(directory).rglob("*")
            if p.is_file() and p.suffix.lower() in self.extensions
        )

    def attempt(self, directory: Path) -> ReadAttempt:
        """Parses the latest file of this format in directory, if any."""
        files = self.find_files(directory)
        if not files:
            return ReadAttempt(self.format)

        path = latest_version(files)
        if len(files) > 1:
            log.debug(
                f"Found {len(files)} {self.format.value} files, using latest "
                f"edition '{path.name}'."
            )
        try:
            table = self.parse(path)
        except Exception as e:
            log.debug(f"Reading '{path.name}' as {self.format.value} failed: {e}")
            return ReadAttempt(self.format, path=path, error=str(e) or type(e).__name__)

        table.attrs.update(
            format=self.format.value,
            source_file=path.name,
            edition=edition_tag(path),
        )
        return ReadAttempt(self.format, path=path, table=table)


# Reading order when no format is requested
READERS: Tuple[FormatReader, ...] = (
    FormatReader(DataFormat.STATA, _read_stata),
    FormatReader(DataFormat.SPSS, _read_spss),
    FormatReader(DataFormat.SAS, _read_sas),
)


def reader_for(fmt: DataFormat) -> FormatReader:
    return next(r for r in READERS if r.format is fmt)


def read_round_data(
    directory: Path, fmt: "str | DataFormat | None" = None
) -> pd.DataFrame:
    """
    Reads the data of one round from an extracted directory.

    Args:
        directory: Directory with the extracted files of a single round.
        fmt: Read only this format. When None, every reader in READERS is
            attempted in order and the first success is returned.

    Raises:
        ParseError: If no attempted reader produced a table.
    """
    directory = Path(directory)
    readers = READERS if fmt is None else (reader_for(DataFormat.parse(fmt)),)

    attempts: List[ReadAttempt] = []
    for reader in readers:
        attempt = reader.attempt(directory)
        attempts.append(attempt)
        if attempt.succeeded:
            log.debug(f"Read '{attempt.path.name}' as {reader.format.value}.")
            return attempt.table

    failed_files = [a.path.name for a in attempts if a.path is not None]
    tried = "; ".join(a.describe() for a in attempts)
    if failed_files:
        names = ", ".join(f"'{n}'" for n in failed_files)
        message = f"Could not parse {names} in '{directory.name}'. Tried: {tried}"
    else:
        message = f"No readable data file found in '{directory.name}'. Tried: {tried}"
    raise ParseError(message, attempts)


def read_format_data(
    directories: Iterable[Path], fmt: "str | DataFormat | None" = None
) -> List[pd.DataFrame]:
    """Reads one table per extracted round directory, keeping their order."""
    return [read_round_data(directory, fmt) for directory in directories]
