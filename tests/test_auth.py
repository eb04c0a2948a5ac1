import asyncio

import pytest

from conftest import ACCEPTED_LOGIN_PAGE, EMAIL, LOGIN_URL, REJECTED_LOGIN_PAGE
from essurvey.api.auth import extract_login_error, resolve_email
from essurvey.api.client import ESSClient
from essurvey.exceptions import AuthenticationError, NetworkError


def test_explicit_email_wins_over_registered():
    assert resolve_email("a@example.org", "b@example.org") == "a@example.org"


def test_registered_email_is_used_when_none_given():
    assert resolve_email(None, " b@example.org ") == "b@example.org"


def test_missing_email_explains_how_to_register():
    with pytest.raises(AuthenticationError, match="ESS_EMAIL"):
        resolve_email(None, "")


@pytest.mark.parametrize("email", ["nobody", "@example.org", "nobody@"])
def test_malformed_email_is_rejected(email):
    with pytest.raises(AuthenticationError, match="not a valid email"):
        resolve_email(email)


def test_extracts_portal_error_message():
    message = extract_login_error(REJECTED_LOGIN_PAGE)

    assert message == (
        "The email address you provided is not associated with any registered user."
    )


def test_no_error_on_welcome_page():
    assert extract_login_error(ACCEPTED_LOGIN_PAGE) is None


async def _login(config, email):
    async with ESSClient(config) as client:
        await client.authenticate(email)
        return client.authenticator.is_authenticated


def test_login_posts_email_to_portal(portal, config):
    portal.post(LOGIN_URL, body=ACCEPTED_LOGIN_PAGE, content_type="text/html")

    assert asyncio.run(_login(config, EMAIL)) is True
    (calls,) = portal.requests.values()
    assert calls[0].kwargs["data"] == {"u": EMAIL}


def test_rejected_login_points_to_registration(portal, config):
    portal.post(LOGIN_URL, body=REJECTED_LOGIN_PAGE, content_type="text/html")

    with pytest.raises(AuthenticationError, match="https://ess.test/user/new"):
        asyncio.run(_login(config, EMAIL))


def test_unreachable_portal_is_a_network_error(portal, config):
    portal.post(LOGIN_URL, status=503)

    with pytest.raises(NetworkError, match="login page"):
        asyncio.run(_login(config, EMAIL))


def test_download_requires_login(config, tmp_path):
    async def download_without_login():
        async with ESSClient(config) as client:
            await client.download_rounds([], tmp_path)

    with pytest.raises(AuthenticationError, match="Log in"):
        asyncio.run(download_without_login())
