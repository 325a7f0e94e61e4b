"""Testing utilities: mock HTTP clients and HTML fixture builders."""

from __future__ import annotations

import contextlib
from typing import Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

import httpx
from bs4 import BeautifulSoup

from ..errors import EvaluatorUnreachableError, SourceUnreachableError
from ..net import (
    HTML_PARSER,
    _request_hook,
    _response_hook,
    configure_http_client,
    reset_http_client,
)
from ..settings import HttpConfiguration

__all__ = [
    "PageFetcher",
    "PropertyRow",
    "RecordingEvaluator",
    "documentation_page",
    "localized_page",
    "use_mock_http_client",
]

#: ``(name, type, default, description_html, upcoming_version)``
PropertyRow = Tuple[str, str, str, str, Optional[str]]


@contextlib.contextmanager
def use_mock_http_client(
    transport: httpx.BaseTransport,
    *,
    default_config: Optional[HttpConfiguration] = None,
    **client_kwargs,
) -> Iterator[httpx.Client]:
    """Temporarily install an HTTPX client backed by ``transport``."""

    client_kwargs.setdefault(
        "event_hooks", {"request": [_request_hook], "response": [_response_hook]}
    )
    client = httpx.Client(transport=transport, **client_kwargs)
    configure_http_client(client=client, default_config=default_config)
    try:
        yield client
    finally:
        reset_http_client()
        client.close()


def _name_cell(name: str, upcoming_version: Optional[str]) -> str:
    cell = f"<b>{name}</b>"
    if upcoming_version:
        cell += (
            '<sup><i><span title="This feature is upcoming">upcoming</span>: '
            f'<a href="/wiki/{upcoming_version}">{upcoming_version}</a></i></sup>'
        )
    return cell


def documentation_page(
    rows: Iterable[PropertyRow],
    *,
    languages: Sequence[str] = (),
    marker: str = "Server properties",
    extra_tables: int = 0,
) -> str:
    """Render an English-style page holding the documentation table.

    ``extra_tables`` unrelated two-column tables are placed before it.
    """

    links = "".join(
        f'<li class="interlanguage-link"><a lang="{lang}" href="/{lang}">{lang}</a></li>'
        for lang in languages
    )
    decoys = "".join(
        "<table class=\"wikitable\"><tr><th>Key</th><th>Value</th></tr>"
        "<tr><td>a</td><td>b</td></tr></table>"
        for _ in range(extra_tables)
    )
    body = "".join(
        "<tr>"
        f"<td>{_name_cell(name, upcoming)}</td>"
        f"<td>{kind}</td><td>{default}</td><td>{description}</td>"
        "</tr>"
        for name, kind, default, description, upcoming in rows
    )
    return (
        "<html><body>"
        f'<div id="p-lang"><ul>{links}</ul></div>'
        f"{decoys}"
        f'<table class="wikitable" data-description="{marker}">'
        "<tr><th>Key</th><th>Type</th><th>Default value</th><th>Description</th></tr>"
        f"{body}</table>"
        "</body></html>"
    )


def localized_page(
    descriptions: Iterable[Tuple[str, str]],
    *,
    name_in_header: bool = False,
    copies: int = 1,
) -> str:
    """Render a mirror page with translated descriptions and no section marker."""

    rows = []
    for name, description in descriptions:
        if name_in_header:
            rows.append(
                f"<tr><th><span><b>{name}</b></span></th>"
                f"<td>tipo</td><td>valor</td><td>{description}</td></tr>"
            )
        else:
            rows.append(
                f"<tr><td><b>{name}</b></td><td>tipo</td><td>valor</td><td>{description}</td></tr>"
            )
    table = (
        '<table class="wikitable">'
        "<tr><th>Clave</th><th>Tipo</th><th>Valor</th><th>Descripción</th></tr>"
        f"{''.join(rows)}</table>"
    )
    intro = '<table class="wikitable"><tr><th>Versión</th><th>Notas</th></tr></table>'
    return f"<html><body>{intro}{table * copies}</body></html>"


class RecordingEvaluator:
    """Arithmetic evaluator double returning canned answers."""

    def __init__(self, answers: Optional[Mapping[str, int]] = None, *, fail: bool = False) -> None:
        self.answers = dict(answers or {})
        self.fail = fail
        self.calls: List[str] = []

    def evaluate(self, expression: str) -> int:
        self.calls.append(expression)
        if self.fail or expression not in self.answers:
            raise EvaluatorUnreachableError(f"no answer for {expression!r}", text=expression)
        return self.answers[expression]


class PageFetcher:
    """Serve canned HTML by URL and record every fetch."""

    def __init__(self, pages: Mapping[str, str]) -> None:
        self.pages = dict(pages)
        self.calls: List[str] = []

    def __call__(self, url: str) -> BeautifulSoup:
        self.calls.append(url)
        if url not in self.pages:
            raise SourceUnreachableError(f"{url} answered with HTTP 404", url=url, status_code=404)
        return BeautifulSoup(self.pages[url], HTML_PARSER)
