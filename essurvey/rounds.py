"""
Download integrated rounds of the European Social Survey.

    >>> from essurvey import import_rounds, download_rounds
    >>> three_rounds = import_rounds([1, 2, 3], "your_email@email.com")
    >>> paths = download_rounds([1, 2], "your_email@email.com", output_dir="data")

Every entry point validates its arguments before touching the network, so a
request for an unknown round or an unsupported format fails immediately.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd

from essurvey.api.auth import resolve_email
from essurvey.core.resolver import RoundsArg, resolve_rounds
from essurvey.core.round_manager import RoundManager
from essurvey.exceptions import ValidationError
from essurvey.models.config import (
    DEFAULT_DOWNLOAD_FORMAT,
    DOWNLOAD_FORMATS,
    IMPORT_FORMATS,
    DataFormat,
    ESSConfig,
)
from essurvey.models.rounds import show_rounds
from essurvey.storage.config_manager import load_config

log = logging.getLogger(__name__)


def import_rounds(
    rounds: RoundsArg,
    ess_email: Optional[str] = None,
    format: "str | DataFormat | None" = None,
    config: Optional[ESSConfig] = None,
) -> Union[pd.DataFrame, List[pd.DataFrame]]:
    """
    Downloads rounds and reads them into DataFrames.

    Args:
        rounds: A round number or a collection of them. Duplicates are
            downloaded once. See show_rounds() for the available rounds.
        ess_email: Email registered at the ESS website. Defaults to the
            email in config.
        format: 'stata' or 'spss'. When None, the Stata archive is downloaded
            and readers are tried in order (Stata, SPSS, SAS). 'sas' is
            rejected because its layout differs between rounds.
        config: Settings for this call. Loaded from the config file and the
            ESS_EMAIL environment variable when None.

    Returns:
        A single DataFrame with the latest edition of the round when one
        round was requested, otherwise a list of DataFrames in request order.

    Raises:
        ValidationError: Bad rounds or format; raised before any network call.
        AuthenticationError: No email, or the portal rejected it.
        NetworkError: A file could not be downloaded.
        ArchiveError: A downloaded archive is corrupt.
        ParseError: No reader could parse a round's data.
    """
    config = config or load_config()
    downloads = resolve_rounds(
        rounds,
        format,
        allowed_formats=IMPORT_FORMATS,
        base_url=config.base_url,
    )
    read_format = downloads[0].format if format is not None else None
    email = resolve_email(ess_email, config.email)

    tables = RoundManager(config).import_tables(downloads, email, read_format)
    return tables[0] if len(tables) == 1 else tables


def import_all_rounds(
    ess_email: Optional[str] = None,
    format: "str | DataFormat | None" = None,
    config: Optional[ESSConfig] = None,
) -> Union[pd.DataFrame, List[pd.DataFrame]]:
    """Imports every available round. See import_rounds()."""
    return import_rounds(show_rounds(), ess_email, format, config)


def download_rounds(
    rounds: RoundsArg,
    ess_email: Optional[str] = None,
    output_dir: "str | Path | None" = None,
    format: "str | DataFormat" = DEFAULT_DOWNLOAD_FORMAT,
    config: Optional[ESSConfig] = None,
) -> List[Path]:
    """
    Downloads the archive of each round into output_dir without reading it.

    Args:
        rounds: A round number or a collection of them.
        ess_email: Email registered at the ESS website.
        output_dir: An existing directory. Defaults to the working directory.
        format: 'stata' (default), 'spss' or 'sas'.
        config: Settings for this call.

    Returns:
        The paths of the saved archives, one per unique round, in request order.
    """
    config = config or load_config()
    downloads = resolve_rounds(
        rounds,
        format,
        allowed_formats=DOWNLOAD_FORMATS,
        base_url=config.base_url,
    )
    target_dir = Path(output_dir) if output_dir is not None else Path.cwd()
    if not target_dir.is_dir():
        raise ValidationError(f"Output directory '{target_dir}' does not exist.")
    email = resolve_email(ess_email, config.email)

    paths = RoundManager(config).download(downloads, email, target_dir)
    log.info(f"All files saved to: [dim]{target_dir.resolve()}[/dim]")
    return paths
