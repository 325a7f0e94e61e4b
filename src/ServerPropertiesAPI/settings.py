# === NAVMAP v1 ===
# {
#   "module": "ServerPropertiesAPI.settings",
#   "purpose": "Typed configuration for the wiki source, HTTP client, arithmetic evaluator, and logging",
#   "sections": [
#     {"id": "models", "name": "Configuration models", "anchor": "MOD", "kind": "api"},
#     {"id": "env", "name": "Environment overrides", "anchor": "ENV", "kind": "api"},
#     {"id": "loader", "name": "Loader", "anchor": "LOAD", "kind": "api"}
#   ]
# }
# === /NAVMAP ===

"""Configuration models for ServerPropertiesAPI.

Settings are grouped per concern. Defaults point at the public wiki page and
the public mathjs endpoint; every value can be overridden through
``SPROPS_``-prefixed environment variables.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

__all__ = [
    "SourceConfiguration",
    "HttpConfiguration",
    "EvaluatorConfiguration",
    "LoggingConfiguration",
    "Settings",
    "EnvironmentOverrides",
    "load_settings",
]

# --- Configuration models ------------------------------------------------------


class SourceConfiguration(BaseModel):
    """Where the documentation lives and how its tables are recognised."""

    wiki_url: str = Field(default="https://minecraft.gamepedia.com/Server.properties")
    wiki_locale_url_template: str = Field(
        default="https://minecraft-{language}.gamepedia.com/Server.properties",
        description="Mirror page URL; ``{language}`` is replaced by the primary language subtag",
    )
    english_table_selector: str = Field(default='[data-description="Server properties"]')
    language_link_selector: str = Field(default="#p-lang .interlanguage-link a")
    localized_header_columns: int = Field(default=4, ge=1)
    strict_table_match: bool = Field(
        default=False,
        description="Fail instead of keeping the first match when several localized tables qualify",
    )

    @field_validator("wiki_locale_url_template")
    @classmethod
    def validate_template(cls, value: str) -> str:
        if "{language}" not in value:
            raise ValueError("wiki_locale_url_template must contain a '{language}' placeholder")
        return value

    model_config = {"validate_assignment": True}


class HttpConfiguration(BaseModel):
    """Timeouts and politeness headers for outbound fetches."""

    timeout_sec: float = Field(default=30.0, gt=0.0, le=300.0)
    connect_timeout_sec: float = Field(default=5.0, gt=0.0, le=60.0)
    follow_redirects: bool = Field(default=True)
    polite_headers: Dict[str, str] = Field(
        default_factory=lambda: {
            "User-Agent": "ServerPropertiesAPI/1.0 (+https://github.com/tmaxmax/serverpropertiesapi)",
        }
    )

    model_config = {"validate_assignment": True}


class EvaluatorConfiguration(BaseModel):
    """Remote arithmetic service used for expression upper bounds."""

    math_api_url: str = Field(default="http://api.mathjs.org/v4/")
    max_attempts: int = Field(default=1, ge=1, le=10)
    backoff_sec: float = Field(default=0.5, ge=0.0, le=30.0)

    model_config = {"validate_assignment": True}


class LoggingConfiguration(BaseModel):
    """Logging-related configuration."""

    level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    json_format: bool = Field(default=False, description="Emit JSON lines on the console")
    log_file: Optional[Path] = Field(default=None)
    max_log_size_mb: int = Field(default=10, gt=0)

    @field_validator("level")
    @classmethod
    def validate_level(cls, value: str) -> str:
        """Normalise logging levels and ensure they match the supported set."""

        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR"}
        upper = value.upper()
        if upper not in valid_levels:
            raise ValueError(f"level must be one of {sorted(valid_levels)}")
        return upper

    model_config = {"validate_assignment": True}


class Settings(BaseModel):
    """Aggregate configuration passed to the service façade."""

    source: SourceConfiguration = Field(default_factory=SourceConfiguration)
    http: HttpConfiguration = Field(default_factory=HttpConfiguration)
    evaluator: EvaluatorConfiguration = Field(default_factory=EvaluatorConfiguration)
    logging: LoggingConfiguration = Field(default_factory=LoggingConfiguration)

    model_config = {"validate_assignment": True}


# --- Environment overrides -----------------------------------------------------


class EnvironmentOverrides(BaseSettings):
    """Pydantic settings model exposing environment-derived overrides."""

    wiki_url: Optional[str] = Field(default=None, alias="SPROPS_WIKI_URL")
    wiki_locale_url_template: Optional[str] = Field(
        default=None, alias="SPROPS_WIKI_LOCALE_URL_TEMPLATE"
    )
    strict_table_match: Optional[bool] = Field(default=None, alias="SPROPS_STRICT_TABLE_MATCH")
    math_api_url: Optional[str] = Field(default=None, alias="SPROPS_MATH_API_URL")
    evaluator_max_attempts: Optional[int] = Field(
        default=None, alias="SPROPS_EVALUATOR_MAX_ATTEMPTS"
    )
    timeout_sec: Optional[float] = Field(default=None, alias="SPROPS_TIMEOUT_SEC")
    log_level: Optional[str] = Field(default=None, alias="SPROPS_LOG_LEVEL")
    log_file: Optional[Path] = Field(default=None, alias="SPROPS_LOG_FILE")

    model_config = SettingsConfigDict(env_prefix="SPROPS_", case_sensitive=False, extra="ignore")


# --- Loader --------------------------------------------------------------------


def _apply_overrides(settings: Settings, env: EnvironmentOverrides) -> None:
    if env.wiki_url is not None:
        settings.source.wiki_url = env.wiki_url
    if env.wiki_locale_url_template is not None:
        settings.source.wiki_locale_url_template = env.wiki_locale_url_template
    if env.strict_table_match is not None:
        settings.source.strict_table_match = env.strict_table_match
    if env.math_api_url is not None:
        settings.evaluator.math_api_url = env.math_api_url
    if env.evaluator_max_attempts is not None:
        settings.evaluator.max_attempts = env.evaluator_max_attempts
    if env.timeout_sec is not None:
        settings.http.timeout_sec = env.timeout_sec
    if env.log_level is not None:
        settings.logging.level = env.log_level
    if env.log_file is not None:
        settings.logging.log_file = env.log_file


def load_settings(base: Optional[Settings] = None) -> Settings:
    """Return settings with ``SPROPS_*`` environment overrides applied.

    Args:
        base: Optional starting point; a fresh :class:`Settings` otherwise.

    Returns:
        Validated settings instance.

    Raises:
        ConfigurationError: If an override fails validation.
    """

    try:
        settings = base.model_copy(deep=True) if base is not None else Settings()
        _apply_overrides(settings, EnvironmentOverrides())
    except PydanticValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
    return settings
