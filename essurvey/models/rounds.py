"""
Static catalog of the integrated ESS rounds and how their files are addressed.
"""

from pydantic import BaseModel, ConfigDict, Field

from essurvey.exceptions import ValidationError

from .config import DataFormat

# Every round is served by the same download endpoint
URL_TEMPLATE = "{base_url}/file/download?f={archive_name}&c=&y={year}"


class Round(BaseModel):
    """One wave of the European Social Survey."""

    model_config = ConfigDict(frozen=True)

    number: int = Field(gt=0)
    year: int
    edition: str
    available: bool = True

    @property
    def file_stem(self) -> str:
        return f"ESS{self.number}{self.edition}"

    def archive_name(self, fmt: DataFormat) -> str:
        """Name of the zip archive the portal serves for this round and format."""
        return f"{self.file_stem}.{fmt.value}.zip"

    def url(self, fmt: DataFormat, base_url: str) -> str:
        return URL_TEMPLATE.format(
            base_url=base_url.rstrip("/"),
            archive_name=self.archive_name(fmt),
            year=self.year,
        )


ROUND_CATALOG: dict[int, Round] = {
    r.number: r
    for r in (
        Round(number=1, year=2002, edition="e06_6"),
        Round(number=2, year=2004, edition="e03_6"),
        Round(number=3, year=2006, edition="e03_7"),
        Round(number=4, year=2008, edition="e04_5"),
        Round(number=5, year=2010, edition="e03_4"),
        Round(number=6, year=2012, edition="e02_4"),
        Round(number=7, year=2014, edition="e02_2"),
        Round(number=8, year=2016, edition="e02_2"),
        Round(number=9, year=2018, edition="e03_1"),
        Round(number=10, year=2020, edition="e03_2"),
        Round(number=11, year=2023, edition="e02_0"),
    )
}


def show_rounds(catalog: dict[int, Round] = ROUND_CATALOG) -> list[int]:
    """Returns the sorted numbers of all rounds available for download."""
    return sorted(number for number, r in catalog.items() if r.available)


def get_round(number: int, catalog: dict[int, Round] = ROUND_CATALOG) -> Round:
    """
    Looks up a round in the catalog.

    Raises:
        ValidationError: If the round is unknown or not available.
    """
    found = catalog.get(number)
    if found is None or not found.available:
        raise ValidationError(
            f"ESS round {number} is not available. Check show_rounds()"
        )
    return found
