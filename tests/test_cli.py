"""Tests for the command line interface."""

from urllib.parse import urlsplit

import pytest

from cli.main import main
from cli.status_display import config_rows
from customer_auth import CustomerAuthConfig
from tests.conftest import AUTHORIZE_ENDPOINT, CLIENT_SECRET, make_config


@pytest.fixture()
def patch_config(monkeypatch: pytest.MonkeyPatch):
    def _patch(config: CustomerAuthConfig) -> None:
        monkeypatch.setattr(CustomerAuthConfig, "from_settings", classmethod(lambda cls: config))

    return _patch


def test_config_rows_mask_the_client_secret() -> None:
    rows = {name: (status, value) for name, status, value in config_rows(make_config())}

    status, value = rows["CUSTOMER_ACCOUNT_API_CLIENT_SECRET"]
    assert status == "set"
    assert CLIENT_SECRET not in value
    assert rows["APP_URL"] == ("set", "https://shop.example.com")


def test_check_config_exits_one_and_names_missing_variables(patch_config, capsys) -> None:
    patch_config(make_config(client_id="", token_endpoint=""))

    with pytest.raises(SystemExit) as exc_info:
        main(["check-config"])

    assert exc_info.value.code == 1
    output = capsys.readouterr().out
    assert "CUSTOMER_ACCOUNT_API_CLIENT_ID" in output
    assert "CUSTOMER_ACCOUNT_API_TOKEN_ENDPOINT" in output


def test_check_config_succeeds_on_complete_config(patch_config) -> None:
    patch_config(make_config())

    with pytest.raises(SystemExit) as exc_info:
        main(["check-config"])

    assert exc_info.value.code == 0


def test_login_url_prints_authorize_url(patch_config, capsys) -> None:
    patch_config(make_config())

    with pytest.raises(SystemExit) as exc_info:
        main(["login-url"])

    assert exc_info.value.code == 0
    output = capsys.readouterr().out.strip()
    parts = urlsplit(output)
    assert f"{parts.scheme}://{parts.netloc}{parts.path}" == AUTHORIZE_ENDPOINT


def test_serve_reports_configuration_errors(patch_config, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("storefront.server.setup_logging", lambda debug=False: None)
    patch_config(make_config(client_secret=""))

    with pytest.raises(SystemExit) as exc_info:
        main(["serve"])

    assert exc_info.value.code == 1
