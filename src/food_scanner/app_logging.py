"""Logging configuration helpers."""

import logging
from collections.abc import Mapping

import httpx

REDACTED = "REDACTED"
_SECRET_QUERY_PARAMS = frozenset({"oauth_token", "access_token", "client_secret"})
_SECRET_HEADERS = frozenset({"authorization", "proxy-authorization"})


def configure_logging() -> None:
    """Configure application logging with a single stream handler."""
    # httpx logs full request URLs, which carry the oauth_token parameter.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logger = logging.getLogger("food_scanner")
    logger.setLevel(logging.INFO)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def redact_url(url: httpx.URL | str) -> str:
    """Return the URL with credential-bearing query values masked."""
    parsed = httpx.URL(str(url))
    if not parsed.query:
        return str(parsed)
    params = [
        (key, REDACTED if key in _SECRET_QUERY_PARAMS else value)
        for key, value in parsed.params.multi_items()
    ]
    return str(parsed.copy_with(params=httpx.QueryParams(params)))


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Return a copy of headers with authorization values masked."""
    return {
        key: REDACTED if key.lower() in _SECRET_HEADERS else value
        for key, value in headers.items()
    }
