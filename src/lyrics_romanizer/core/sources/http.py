"""HTTP helpers shared by the song sources."""

from typing import Any, Dict, Optional

import requests

from ... import config
from ...exceptions import UpstreamError
from ...utils.logging import get_logger
from ...utils.retry import retry_request

logger = get_logger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": config.USER_AGENT,
    "Accept": "*/*",
}

# Retried; a 4xx answer is final and is not retried
_TRANSIENT = (requests.exceptions.ConnectionError, requests.exceptions.Timeout)


def _get(
    url: str,
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
) -> requests.Response:
    response = requests.get(
        url,
        params=params,
        headers=headers or DEFAULT_HEADERS,
        timeout=timeout or config.UPSTREAM_TIMEOUT,
    )
    if response.status_code >= 500:
        # Treat server errors as transient
        raise requests.exceptions.ConnectionError(
            f"{response.status_code} from {url}"
        )
    return response


def fetch(
    url: str,
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
) -> Optional[requests.Response]:
    """GET ``url`` with retries.

    Returns None for 404, raises :class:`UpstreamError` for transport
    failures and other error statuses.
    """
    try:
        response = retry_request(
            _get,
            url,
            params=params,
            headers=headers,
            timeout=timeout,
            max_retries=config.UPSTREAM_MAX_RETRIES,
            exceptions=_TRANSIENT,
        )
    except requests.exceptions.RequestException as e:
        raise UpstreamError(f"Request to {url} failed: {e}", url=url)

    if response.status_code == 404:
        return None
    if not response.ok:
        raise UpstreamError(
            f"Request to {url} returned {response.status_code}",
            url=url,
            status=response.status_code,
        )
    return response


def fetch_json(url: str, params: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Any:
    """GET ``url`` and decode JSON; None when the resource does not exist."""
    response = fetch(url, params=params, **kwargs)
    if response is None:
        return None
    try:
        return response.json()
    except ValueError as e:
        raise UpstreamError(f"Invalid JSON from {url}: {e}", url=url)


def fetch_html(
    url: str, params: Optional[Dict[str, Any]] = None, **kwargs: Any
) -> Optional[str]:
    response = fetch(url, params=params, **kwargs)
    if response is None:
        return None
    return response.text
