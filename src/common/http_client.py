"""Shared HTTP helpers used by the artifact fetcher, catalog and URL checker.

Encapsulates common request/timeout error handling so modules avoid
duplicating try/except blocks. Transport failures surface as FetchError so
callers can fold them into their own result types.
"""
from __future__ import annotations

import logging
import json
from typing import Any, Optional, Dict, Tuple

import requests

from constants import Constants
from common.errors import ErrorKind, FetchError
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)

Timeout = Tuple[float, float]


def default_timeout() -> Timeout:
    """(connect, read) timeout for artifact downloads."""
    return (Constants.CONNECT_TIMEOUT, Constants.READ_TIMEOUT)


def _headers(extra: Optional[Dict[str, str]], user_agent: Optional[str] = None) -> Dict[str, str]:
    headers = {"User-Agent": user_agent or Constants.USER_AGENT}
    if extra:
        headers.update(extra)
    return headers


def safe_get(
    url: str,
    *,
    context: str,
    timeout: Optional[Timeout] = None,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any,
) -> requests.Response:
    """Perform a GET request with consistent error handling and DEBUG traces.

    Args:
        url: Target URL.
        context: Human-readable source tag for logs (e.g., "mappings", "library").
        timeout: (connect, read) seconds; defaults to the download timeouts.
        headers: Extra headers merged over the identifying User-Agent.
        **kwargs: Passed through to requests.get (e.g. stream=True).

    Returns:
        requests.Response: The HTTP response object, any status.

    Raises:
        FetchError: On timeout, DNS or connection failure.
    """
    safe_target = safe_url(url)
    effective_timeout = timeout or default_timeout()
    with Timer() as t:
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP request",
                extra=extra_context(
                    event="http_request",
                    component="http_client",
                    action="GET",
                    target=safe_target,
                    context=context
                )
            )
        try:
            res = requests.get(url, timeout=effective_timeout, headers=_headers(headers), **kwargs)
        except requests.Timeout as exc:
            logger.error(
                "%s request timed out after %s seconds",
                context,
                effective_timeout,
            )
            raise FetchError(f"Request timed out: {safe_target}", ErrorKind.NETWORK_FAILURE) from exc
        except requests.RequestException as exc:  # includes ConnectionError
            logger.error("%s connection error: %s", context, exc)
            raise FetchError(f"Connection error: {exc}", ErrorKind.NETWORK_FAILURE) from exc

        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response",
                extra=extra_context(
                    event="http_response",
                    component="http_client",
                    action="GET",
                    outcome="success" if res.status_code == 200 else "non_200",
                    status_code=res.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                    context=context
                )
            )
        return res


def safe_head(
    url: str,
    *,
    context: str,
    timeout: Optional[Timeout] = None,
    user_agent: Optional[str] = None,
) -> int:
    """Perform a HEAD request following redirects.

    Returns:
        The final status code, or 0 when the request could not be made.
    """
    try:
        res = requests.head(
            url,
            timeout=timeout or default_timeout(),
            headers=_headers(None, user_agent),
            allow_redirects=True,
        )
    except requests.RequestException as exc:
        logger.debug("%s HEAD failed for %s: %s", context, safe_url(url), exc)
        return 0
    return res.status_code


def get_json(
    url: str,
    *,
    context: str,
    timeout: Optional[Timeout] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Tuple[int, Dict[str, str], Optional[Any]]:
    """Perform a single GET request and parse a JSON response with DEBUG traces.

    Args:
        url: Target URL
        context: Source tag for logs
        timeout: (connect, read) seconds
        headers: Optional request headers

    Returns:
        Tuple of (status_code, headers_dict, parsed_json_or_none); status is 0
        when the request never completed.
    """
    try:
        res = safe_get(url, context=context, timeout=timeout, headers=headers)
    except FetchError:
        return 0, {}, None

    if res.status_code == 200 and res.text:
        try:
            parsed = json.loads(res.text)
        except json.JSONDecodeError:
            if is_debug_enabled(logger):
                logger.debug(
                    "JSON decode error",
                    extra=extra_context(
                        event="parse",
                        component="http_client",
                        action="get_json",
                        outcome="json_decode_error",
                        status_code=res.status_code,
                        target=safe_url(url)
                    )
                )
            return res.status_code, dict(res.headers), None
        return res.status_code, dict(res.headers), parsed

    return res.status_code, dict(res.headers), None
