"""
Pytest Configuration

Shared fixtures for the ServerPropertiesAPI suite: canned documentation
pages, an in-memory document fetcher, and a recording arithmetic evaluator
so no test touches the network.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List

import pytest
from bs4 import BeautifulSoup

# --- Globals ---

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from ServerPropertiesAPI.logging_config import ROOT_LOGGER_NAME  # noqa: E402
from ServerPropertiesAPI.net import reset_http_client  # noqa: E402
from ServerPropertiesAPI.service import ServerPropertiesService  # noqa: E402
from ServerPropertiesAPI.settings import Settings  # noqa: E402
from ServerPropertiesAPI.testing import (  # noqa: E402
    PageFetcher,
    PropertyRow,
    RecordingEvaluator,
    documentation_page,
)

WIKI_URL = "https://wiki.test/Server.properties"
LOCALE_TEMPLATE = "https://wiki-{language}.test/Server.properties"

SAMPLE_ROWS: List[PropertyRow] = [
    ("allow-flight", "boolean", "false", "Allows users to use flight.", None),
    (
        "difficulty",
        "string",
        "easy",
        "Defines the difficulty.<dl><dd><b>peaceful</b> (0)</dd><dd><b>easy</b> (1)</dd>"
        "<dd><b>Note:</b> legacy numbers are accepted.</dd><dd></dd></dl>",
        None,
    ),
    ("max-players", "integer (0-2147483647)", "20", "The maximum number of players.", None),
    (
        "max-world-size",
        "integer (1-(30000000*8))",
        "29999984",
        "Maximum possible size in blocks.",
        None,
    ),
    ("hide-online-players", "boolean", "false", "Hides the player list.", "1.18"),
    ("view-distance", "integer (3–32)", "10", "Sets the view distance.", None),
    ("rcon.password", "string", "(blank)", "Sets the password for remote access.", None),
]

# --- Fixtures ---


@pytest.fixture
def wiki_url() -> str:
    return WIKI_URL


@pytest.fixture
def locale_template() -> str:
    return LOCALE_TEMPLATE


@pytest.fixture
def sample_rows() -> List[PropertyRow]:
    return list(SAMPLE_ROWS)


@pytest.fixture
def settings() -> Settings:
    settings = Settings()
    settings.source.wiki_url = WIKI_URL
    settings.source.wiki_locale_url_template = LOCALE_TEMPLATE
    return settings


@pytest.fixture
def evaluator() -> RecordingEvaluator:
    return RecordingEvaluator({"30000000*8": 240000000})


@pytest.fixture
def sample_page() -> str:
    return documentation_page(SAMPLE_ROWS, languages=["de", "es", "pt-BR"])


@pytest.fixture
def sample_table(sample_page: str):
    document = BeautifulSoup(sample_page, "lxml")
    return document.select_one('[data-description="Server properties"]')


@pytest.fixture
def make_service(
    settings: Settings, evaluator: RecordingEvaluator
) -> Callable[..., ServerPropertiesService]:
    """Build a service over canned pages; the fetcher is reachable as ``service.fetch``."""

    def _make(pages: Dict[str, str], **overrides) -> ServerPropertiesService:
        return ServerPropertiesService(
            settings,
            fetch=PageFetcher(pages),
            evaluator=overrides.get("evaluator", evaluator),
        )

    return _make


@pytest.fixture(autouse=True)
def _isolate_globals():
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)
    reset_http_client()
