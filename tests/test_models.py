import pydantic
import pytest

from essurvey.exceptions import ValidationError
from essurvey.models.config import DataFormat, ESSConfig
from essurvey.models.rounds import ROUND_CATALOG, Round, get_round, show_rounds


def test_show_rounds_lists_catalog_in_order():
    assert show_rounds() == list(range(1, 12))


def test_show_rounds_skips_unavailable_rounds():
    catalog = {
        2: Round(number=2, year=2004, edition="e03_6"),
        1: Round(number=1, year=2002, edition="e06_6"),
        3: Round(number=3, year=2006, edition="e03_7", available=False),
    }

    assert show_rounds(catalog) == [1, 2]


def test_get_round_returns_metadata():
    ess_round = get_round(8)

    assert ess_round.year == 2016
    assert ess_round.archive_name(DataFormat.SPSS) == "ESS8e02_2.spss.zip"


def test_get_round_rejects_unknown_round():
    with pytest.raises(ValidationError, match="Check show_rounds"):
        get_round(0)


def test_rounds_are_immutable():
    with pytest.raises(pydantic.ValidationError):
        ROUND_CATALOG[1].edition = "e99_9"


def test_config_strips_trailing_slash_from_base_url():
    config = ESSConfig(base_url="https://ess.test/")

    assert config.login_url == "https://ess.test/user/login"
    assert config.register_url == "https://ess.test/user/new"


@pytest.mark.parametrize(
    "settings", [{"base_url": "ftp://ess.test"}, {"timeout": 0}, {"timeout": -5}]
)
def test_config_rejects_invalid_settings(settings):
    with pytest.raises(pydantic.ValidationError):
        ESSConfig(**settings)


def test_data_format_parse_rejects_unknown_names():
    with pytest.raises(ValidationError):
        DataFormat.parse("csv")
