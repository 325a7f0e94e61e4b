"""Command line interface for ServerPropertiesAPI.

Usage:
    serverproperties list --types integer --sort -name
    serverproperties list --contains max,!view --upcoming false --lang es
    serverproperties get max-players --lang de
    serverproperties meta
"""

from __future__ import annotations

import json
import logging
from typing import Any, List, Optional

import typer

from .errors import PropertyNotFoundError, QueryInvalidError, ServerPropertiesError
from .logging_config import setup_logging
from .problems import problem_for
from .query import parse_query
from .service import ServerPropertiesService
from .settings import load_settings

LOGGER = logging.getLogger(__name__)

EXIT_NOT_FOUND = 1
EXIT_INVALID_QUERY = 2
EXIT_FAILURE = 3

app = typer.Typer(help="Query the documented server.properties keys", no_args_is_help=True)


def build_service() -> ServerPropertiesService:
    return ServerPropertiesService(load_settings())


def _emit(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _fail(exc: ServerPropertiesError) -> None:
    typer.echo(json.dumps(problem_for(exc).to_dict(), indent=2), err=True)
    if isinstance(exc, QueryInvalidError):
        raise typer.Exit(EXIT_INVALID_QUERY)
    if isinstance(exc, PropertyNotFoundError):
        raise typer.Exit(EXIT_NOT_FOUND)
    LOGGER.error("request failed", extra={"error": str(exc), "error_type": type(exc).__name__})
    raise typer.Exit(EXIT_FAILURE)


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", help="DEBUG, INFO, WARNING or ERROR"),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit JSON log lines"),
) -> None:
    """Configure logging before any command runs."""
    config = load_settings().logging
    try:
        config.level = log_level
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level")
    config.json_format = json_logs
    setup_logging(config)


@app.command("list")
def list_properties(
    contains: Optional[List[str]] = typer.Option(
        None, "--contains", "-c", help="Substring the name must contain; prefix with ! to exclude"
    ),
    types: Optional[List[str]] = typer.Option(
        None, "--types", "-t", help="boolean, integer or string; prefix with ! to exclude"
    ),
    upcoming: Optional[str] = typer.Option(None, "--upcoming", help="true or false"),
    sort: Optional[List[str]] = typer.Option(
        None, "--sort", "-s", help="name, type or upcoming; prefix with - for descending"
    ),
    lang: Optional[str] = typer.Option(None, "--lang", "-l", help="Preferred description language"),
) -> None:
    """Print the documented keys matching the filters as a JSON array."""
    params = {
        "contains": contains or [],
        "types": types or [],
        "sort": sort or [],
        "upcoming": [upcoming] if upcoming is not None else [],
    }
    try:
        spec = parse_query(params, locale=lang)
        records = build_service().properties(spec)
    except ServerPropertiesError as exc:
        _fail(exc)
        return
    _emit([record.to_dict() for record in records])


@app.command("get")
def get_property(
    key: str = typer.Argument(..., help="Exact, case-sensitive key name"),
    lang: Optional[str] = typer.Option(None, "--lang", "-l", help="Preferred description language"),
) -> None:
    """Print a single key as a JSON object."""
    try:
        record = build_service().property(key, locale=lang)
    except ServerPropertiesError as exc:
        _fail(exc)
        return
    _emit(record.to_dict())


@app.command("meta")
def metadata() -> None:
    """Print the type names and the unbounded sentinel."""
    _emit(build_service().metadata())


@app.command("locales")
def locales() -> None:
    """Print the languages the documentation page is translated to."""
    try:
        available = build_service().available_locales()
    except ServerPropertiesError as exc:
        _fail(exc)
        return
    _emit(available)


__all__ = ["app", "build_service"]
