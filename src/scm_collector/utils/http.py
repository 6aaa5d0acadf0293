"""
HTTP transport factory shared by the platform adapters.
"""
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .logger import get_logger

logger = get_logger(__name__)

RETRY_STATUS_CODES = (500, 502, 503, 504)


class TimeoutHTTPAdapter(HTTPAdapter):
    """HTTPAdapter that applies a default timeout to every request."""

    def __init__(self, *args, timeout: Optional[float] = None, **kwargs):
        self.timeout = timeout
        super().__init__(*args, **kwargs)

    def send(self, request, **kwargs):
        if kwargs.get("timeout") is None:
            kwargs["timeout"] = self.timeout
        return super().send(request, **kwargs)


def build_auth_headers(token: str, auth_scheme: str = "token") -> dict:
    """
    Build the authentication headers for a platform API.

    Args:
        token: Access token
        auth_scheme: ``"token"`` for an Authorization header,
            ``"private-token"`` for GitLab's PRIVATE-TOKEN header

    Returns:
        Header dictionary (empty when no token is given)
    """
    if not token:
        return {}
    if auth_scheme == "private-token":
        return {"PRIVATE-TOKEN": token}
    return {"Authorization": f"token {token}"}


def get_http_session(
    token: str,
    timeout: float = 30,
    max_retries: int = 3,
    verify_ssl: bool = True,
    auth_scheme: str = "token",
) -> requests.Session:
    """
    Create an authenticated requests session with retries and a default timeout.

    Each call returns a new session; sessions are never shared between
    aggregations.
    """
    session = requests.Session()
    session.headers.update(build_auth_headers(token, auth_scheme))
    session.headers["Accept"] = "application/json"
    session.verify = verify_ssl

    retry = Retry(
        total=max_retries,
        backoff_factor=0.5,
        status_forcelist=RETRY_STATUS_CODES,
        allowed_methods=("GET", "HEAD"),
        raise_on_status=False,
    )
    adapter = TimeoutHTTPAdapter(max_retries=retry, timeout=timeout)
    session.mount("https://", adapter)
    session.mount("http://", adapter)

    logger.debug(f"Created HTTP session (timeout={timeout}s, retries={max_retries})")
    return session
