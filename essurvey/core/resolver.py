"""
Validates round requests and turns them into download URLs.

Everything here is local: a request that fails in this module never touches
the network.
"""

import logging
from dataclasses import dataclass
from numbers import Integral
from typing import Iterable, List, Optional, Sequence, Union

from pathvalidate import sanitize_filename

from essurvey.exceptions import ValidationError
from essurvey.models.config import (
    DEFAULT_BASE_URL,
    DEFAULT_DOWNLOAD_FORMAT,
    DOWNLOAD_FORMATS,
    DataFormat,
    get_format_info,
)
from essurvey.models.rounds import ROUND_CATALOG, Round, get_round

log = logging.getLogger(__name__)

RoundsArg = Union[int, Iterable[int]]


@dataclass(frozen=True)
class RoundDownload:
    """A single validated round request, ready to be fetched."""

    round: Round
    format: DataFormat
    url: str

    @property
    def archive_name(self) -> str:
        return sanitize_filename(self.round.archive_name(self.format))


def check_format(
    fmt: "str | DataFormat | None",
    allowed_formats: Sequence[DataFormat] = DOWNLOAD_FORMATS,
) -> DataFormat:
    """
    Parses a format argument and checks that the operation supports it.

    A missing format resolves to the default download format.
    """
    parsed = DEFAULT_DOWNLOAD_FORMAT if fmt is None else DataFormat.parse(fmt)
    if parsed not in allowed_formats:
        allowed = " and ".join(f"'{f.value}'" for f in allowed_formats)
        raise ValidationError(
            f"You cannot read {get_format_info(parsed)['name']} but only {allowed} "
            "files with this function. SAS files changed layout between rounds "
            "and cannot be read consistently."
        )
    return parsed


def validate_rounds(rounds: RoundsArg) -> List[int]:
    """
    Checks that rounds is a non-empty collection of integers and removes
    duplicates, keeping the order of first appearance.
    """
    if isinstance(rounds, Integral) and not isinstance(rounds, bool):
        rounds = [rounds]
    if isinstance(rounds, (str, bytes)):
        raise ValidationError(f"Rounds must be integers, got {rounds!r}.")

    try:
        requested = list(rounds)
    except TypeError:
        raise ValidationError(
            f"Rounds must be an integer or a collection of integers, got {rounds!r}."
        ) from None

    if not requested:
        raise ValidationError("At least one round must be requested.")

    for value in requested:
        if isinstance(value, bool) or not isinstance(value, Integral):
            raise ValidationError(f"Rounds must be integers, got {value!r}.")

    unique = list(dict.fromkeys(int(r) for r in requested))
    if len(unique) < len(requested):
        log.debug(f"Removed {len(requested) - len(unique)} duplicate round(s).")
    return unique


def resolve_rounds(
    rounds: RoundsArg,
    fmt: "str | DataFormat | None" = None,
    *,
    allowed_formats: Sequence[DataFormat] = DOWNLOAD_FORMATS,
    catalog: Optional[dict] = None,
    base_url: str = DEFAULT_BASE_URL,
) -> List[RoundDownload]:
    """
    Validates a round request and resolves one download per unique round.

    The format is checked first, so an unsupported format fails without any
    round being looked up.

    Raises:
        ValidationError: On an unsupported format, an empty or non-integer
            round list, or a round missing from the catalog.
    """
    checked_format = check_format(fmt, allowed_formats)
    catalog = ROUND_CATALOG if catalog is None else catalog

    downloads = []
    for number in validate_rounds(rounds):
        ess_round = get_round(number, catalog)
        downloads.append(
            RoundDownload(
                round=ess_round,
                format=checked_format,
                url=ess_round.url(checked_format, base_url),
            )
        )
    return downloads


def round_urls(
    rounds: RoundsArg,
    fmt: "str | DataFormat | None" = DEFAULT_DOWNLOAD_FORMAT,
    *,
    catalog: Optional[dict] = None,
    base_url: str = DEFAULT_BASE_URL,
) -> List[str]:
    """Returns the download URL of every unique requested round, in order."""
    return [
        d.url
        for d in resolve_rounds(rounds, fmt, catalog=catalog, base_url=base_url)
    ]
