# === NAVMAP v1 ===
# {
#   "module": "ServerPropertiesAPI.net",
#   "purpose": "Provide a shared HTTPX client and the document fetch primitive",
#   "sections": [
#     {"id": "constants", "name": "Constants & globals", "anchor": "CONST", "kind": "constants"},
#     {"id": "helpers", "name": "Client construction helpers", "anchor": "HELP", "kind": "helpers"},
#     {"id": "api", "name": "Public API", "anchor": "API", "kind": "api"}
#   ]
# }
# === /NAVMAP ===

"""Shared HTTPX client used for wiki pages and the arithmetic service."""

from __future__ import annotations

import contextlib
import logging
import threading
import time
from typing import Callable, Mapping, MutableMapping, Optional

import httpx
from bs4 import BeautifulSoup

from .errors import SourceUnreachableError
from .settings import HttpConfiguration

LOGGER = logging.getLogger(__name__)

# --- Constants & globals -------------------------------------------------------

HTML_PARSER = "lxml"
_CLIENT_LOCK = threading.RLock()
_HTTP_CLIENT: Optional[httpx.Client] = None
_CLIENT_FACTORY: Optional[Callable[[], httpx.Client]] = None
_DEFAULT_CONFIG = HttpConfiguration()
_HTTPX_USER_AGENT = "python-httpx/"

# --- Client construction helpers ----------------------------------------------


def _request_hook(request: httpx.Request) -> None:
    for header, value in _DEFAULT_CONFIG.polite_headers.items():
        current = request.headers.get(header)
        # httpx always fills in its own User-Agent; only that default is replaced
        if current is None or current.startswith(_HTTPX_USER_AGENT):
            request.headers[header] = value
    meta: MutableMapping[str, object] = request.extensions.setdefault("sprops_meta", {})  # type: ignore[assignment]
    meta["start_time"] = time.perf_counter()


def _response_hook(response: httpx.Response) -> None:
    meta: Mapping[str, object] = response.request.extensions.get("sprops_meta", {})
    start = meta.get("start_time")
    elapsed = time.perf_counter() - start if isinstance(start, float) else None
    LOGGER.debug(
        "http-response",
        extra={
            "url": str(response.request.url),
            "status": response.status_code,
            "elapsed_sec": elapsed,
        },
    )
    if response.is_redirect:
        return
    response.raise_for_status()


def _timeout_for(config: HttpConfiguration) -> httpx.Timeout:
    return httpx.Timeout(config.timeout_sec, connect=config.connect_timeout_sec)


def _build_http_client(config: HttpConfiguration) -> httpx.Client:
    return httpx.Client(
        timeout=_timeout_for(config),
        headers=dict(config.polite_headers),
        follow_redirects=config.follow_redirects,
        trust_env=True,
        event_hooks={"request": [_request_hook], "response": [_response_hook]},
    )


def _close_client_unlocked() -> None:
    global _HTTP_CLIENT
    if _HTTP_CLIENT is not None:
        with contextlib.suppress(Exception):
            _HTTP_CLIENT.close()
    _HTTP_CLIENT = None


# --- Public API ----------------------------------------------------------------


def configure_http_client(
    client: Optional[httpx.Client] = None,
    *,
    factory: Optional[Callable[[], httpx.Client]] = None,
    default_config: Optional[HttpConfiguration] = None,
) -> None:
    """Override the shared HTTPX client or register a factory for tests."""

    if client is not None and factory is not None:
        raise ValueError("provide either a client or factory, not both")

    with _CLIENT_LOCK:
        global _HTTP_CLIENT, _CLIENT_FACTORY, _DEFAULT_CONFIG

        if default_config is not None:
            _DEFAULT_CONFIG = default_config

        if client is None:
            _close_client_unlocked()
        else:
            if _HTTP_CLIENT is not client:
                _close_client_unlocked()
            _HTTP_CLIENT = client

        _CLIENT_FACTORY = factory


def reset_http_client() -> None:
    """Reset the shared HTTPX client to its default configuration (test helper)."""

    with _CLIENT_LOCK:
        global _CLIENT_FACTORY, _DEFAULT_CONFIG
        _CLIENT_FACTORY = None
        _DEFAULT_CONFIG = HttpConfiguration()
        _close_client_unlocked()


def get_http_client(config: Optional[HttpConfiguration] = None) -> httpx.Client:
    """Return the shared HTTPX client, creating it if necessary."""

    global _HTTP_CLIENT, _DEFAULT_CONFIG
    with _CLIENT_LOCK:
        if _HTTP_CLIENT is not None:
            return _HTTP_CLIENT

        if config is not None:
            _DEFAULT_CONFIG = config

        if _CLIENT_FACTORY is not None:
            candidate = _CLIENT_FACTORY()
            if not isinstance(candidate, httpx.Client):
                raise TypeError("client factory must return an httpx.Client")
            _HTTP_CLIENT = candidate
            return candidate

        _HTTP_CLIENT = _build_http_client(_DEFAULT_CONFIG)
        return _HTTP_CLIENT


def fetch_document(url: str, config: Optional[HttpConfiguration] = None) -> BeautifulSoup:
    """Download ``url`` and parse it into an HTML tree.

    Args:
        url: Page to fetch.
        config: Optional HTTP settings used when the shared client is first built.

    Returns:
        Parsed document.

    Raises:
        SourceUnreachableError: On transport failures or non-2xx responses.
    """

    client = get_http_client(config)
    LOGGER.debug("fetching document", extra={"url": url})
    try:
        response = client.get(url)
    except httpx.HTTPStatusError as exc:
        raise SourceUnreachableError(
            f"{url} answered with HTTP {exc.response.status_code}",
            url=url,
            status_code=exc.response.status_code,
        ) from exc
    except httpx.HTTPError as exc:
        raise SourceUnreachableError(f"could not fetch {url}: {exc}", url=url) from exc
    if response.is_error or response.is_redirect:
        # clients installed through configure_http_client may lack the response hook
        raise SourceUnreachableError(
            f"{url} answered with HTTP {response.status_code}",
            url=url,
            status_code=response.status_code,
        )
    return BeautifulSoup(response.text, HTML_PARSER)


__all__ = [
    "configure_http_client",
    "fetch_document",
    "get_http_client",
    "reset_http_client",
]
