from __future__ import annotations

import pytest

from golden_ticket.errors import NotSignedInError
from tests.conftest import GAME


def test_require_user_before_login(services):
    with pytest.raises(NotSignedInError):
        services.auth.require_user()


def test_login_sets_token_and_records_profile(services, api):
    api.clear_token()

    session = services.auth.login("ada", "secret")

    assert session.signed_in
    assert services.auth.require_user() == 7
    assert api.token == "tok-7"
    assert services.progress.get_profile(7)["membership_level"] == "gold"
    assert services.progress.get_progress(7, GAME).membership_level == "gold"


def test_session_repr_hides_token(services):
    session = services.auth.login("ada", "secret")
    assert "tok-7" not in repr(session)


def test_sign_out_clears_token(services, api):
    services.auth.login("ada", "secret")
    services.auth.sign_out()

    assert not services.auth.session.signed_in
    assert api.token is None
    with pytest.raises(NotSignedInError):
        services.auth.require_user()


def test_register_passes_through(services, api):
    outcome = services.auth.register("ada", "secret", "ada@example.com")
    assert outcome.succeeded
    assert api.count("register") == 1
