"""Tests for the shared HTTP session factory."""

import pytest

from scm_collector.utils.http import (
    TimeoutHTTPAdapter,
    build_auth_headers,
    get_http_session,
    RETRY_STATUS_CODES,
)


class TestBuildAuthHeaders:
    """Test authentication header construction."""

    @pytest.mark.parametrize("scheme,expected", [
        ("token", {"Authorization": "token abc"}),
        ("private-token", {"PRIVATE-TOKEN": "abc"}),
    ])
    def test_schemes(self, scheme, expected):
        assert build_auth_headers("abc", scheme) == expected

    def test_default_scheme(self):
        assert build_auth_headers("abc") == {"Authorization": "token abc"}

    @pytest.mark.parametrize("token", [None, ""])
    def test_no_token(self, token):
        assert build_auth_headers(token, "private-token") == {}


class TestGetHttpSession:
    """Test session construction."""

    def test_headers_and_verification(self):
        session = get_http_session("abc", verify_ssl=False, auth_scheme="private-token")

        assert session.headers["PRIVATE-TOKEN"] == "abc"
        assert session.headers["Accept"] == "application/json"
        assert "Authorization" not in session.headers
        assert session.verify is False

    def test_mounted_adapter(self):
        session = get_http_session("abc", timeout=12, max_retries=5)

        adapter = session.get_adapter("https://api.github.com/user")
        assert isinstance(adapter, TimeoutHTTPAdapter)
        assert adapter.timeout == 12
        assert adapter.max_retries.total == 5
        assert set(adapter.max_retries.status_forcelist) == set(RETRY_STATUS_CODES)
        assert isinstance(session.get_adapter("http://gitlab.local/api/v4"), TimeoutHTTPAdapter)

    def test_sessions_are_not_shared(self):
        assert get_http_session("abc") is not get_http_session("abc")


class TestTimeoutHTTPAdapter:
    """Test default timeout injection."""

    def test_applies_default_timeout(self, mocker):
        send = mocker.patch("requests.adapters.HTTPAdapter.send", return_value="response")
        adapter = TimeoutHTTPAdapter(timeout=7)

        assert adapter.send("request") == "response"
        assert send.call_args.kwargs["timeout"] == 7

    def test_keeps_explicit_timeout(self, mocker):
        send = mocker.patch("requests.adapters.HTTPAdapter.send", return_value="response")
        adapter = TimeoutHTTPAdapter(timeout=7)

        adapter.send("request", timeout=2)

        assert send.call_args.kwargs["timeout"] == 2
