import io
import re
import zipfile
from pathlib import Path

import pandas as pd
import pytest
from aioresponses import aioresponses

from essurvey.models.config import ESSConfig

BASE_URL = "https://ess.test"
LOGIN_URL = f"{BASE_URL}/user/login"
EMAIL = "researcher@example.org"

REJECTED_LOGIN_PAGE = """
<html><body>
  <div class="messages">
    <p class="error">The email address you provided is not associated with any
    registered user.</p>
  </div>
</body></html>
"""
ACCEPTED_LOGIN_PAGE = "<html><body><p>Welcome back!</p></body></html>"


def round_frame(number: int) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "essround": [number] * 3,
            "idno": [1, 2, 3],
            "cntry": ["BE", "DE", "FR"],
            "happy": [7, 8, 5],
        }
    )


def write_stata(path: Path, frame: pd.DataFrame) -> Path:
    frame.to_stata(
        path,
        write_index=False,
        variable_labels={"idno": "Respondent's identification number"},
    )
    return path


def zip_bytes(members: dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, content in members.items():
            archive.writestr(name, content)
    return buffer.getvalue()


def stata_archive(tmp_path: Path, number: int, edition: str) -> bytes:
    """A zip like the portal serves: one .dta file for the round."""
    source = tmp_path / f"source_{number}_{edition}.dta"
    write_stata(source, round_frame(number))
    return zip_bytes({f"ESS{number}{edition}.dta": source.read_bytes()})


def archive_pattern(number: int, fmt: str = "stata") -> re.Pattern:
    return re.compile(rf".*/file/download\?.*f=ESS{number}e\d+_\d+\.{fmt}\.zip.*")


def register_login(mock: aioresponses, accepted: bool = True) -> None:
    mock.post(
        LOGIN_URL,
        status=200,
        body=ACCEPTED_LOGIN_PAGE if accepted else REJECTED_LOGIN_PAGE,
        content_type="text/html",
    )


def register_archive(
    mock: aioresponses, number: int, body: bytes, fmt: str = "stata"
) -> None:
    mock.get(
        archive_pattern(number, fmt),
        status=200,
        body=body,
        content_type="application/zip",
    )


def request_count(mock: aioresponses, method: str) -> int:
    return sum(len(calls) for (m, _), calls in mock.requests.items() if m == method)


@pytest.fixture
def portal():
    with aioresponses() as mock:
        yield mock


@pytest.fixture
def work_root(tmp_path: Path) -> Path:
    root = tmp_path / "work"
    root.mkdir()
    return root


@pytest.fixture
def config(work_root: Path) -> ESSConfig:
    return ESSConfig(base_url=BASE_URL, temp_dir=str(work_root))


@pytest.fixture
def fixtures_dir(tmp_path: Path) -> Path:
    path = tmp_path / "fixtures"
    path.mkdir()
    return path
