"""Configuration and settings module for Todo Catalog MCP.

Provides the :class:`CatalogConfig` class which centralises all configuration
for the catalog server and the HTTP stub API.  Configuration is resolved in
priority order:

1. **Environment variables** (highest priority) -- ``TODO_CATALOG_*``
2. **Config file** -- ``./todo-catalog.json`` or an explicit path
3. **Defaults** (lowest priority) -- sensible built-in values

Typical usage::

    config = CatalogConfig.load()                         # ./todo-catalog.json + env
    config = CatalogConfig.load("/etc/todo/config.json")  # explicit config file
    config = CatalogConfig(locale="ja")                   # programmatic construction

    print(config.uri_scheme)   # "todo"  (or overridden value)
    print(config.log_level)    # "INFO"  (or overridden value)
"""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from todo_catalog_mcp.messages import SUPPORTED_LOCALES

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Config file looked up in the working directory when no path is given.
DEFAULT_CONFIG_FILE_NAME = "todo-catalog.json"

# Environment variable prefix.  All config keys can be overridden by setting
# ``TODO_CATALOG_<UPPER_KEY>``.  For example, ``TODO_CATALOG_LOCALE=ja``.
ENV_PREFIX = "TODO_CATALOG_"

# Name of the package logger configured by :meth:`CatalogConfig.configure_logging`.
PACKAGE_LOGGER = "todo_catalog_mcp"

_URI_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.\-]*$")

_TRUE_VALUES = ("true", "1", "yes")

# ---------------------------------------------------------------------------
# Configuration model
# ---------------------------------------------------------------------------


class CatalogConfig(BaseModel):
    """Centralised configuration for the catalog server and stub API.

    Every field has a sensible default.  Fields can be overridden by a
    JSON config file or by environment variables (see module docstring).

    Attributes
    ----------
    server_name:
        Name advertised by the MCP server during initialisation.
    log_level:
        Python logging level name.  One of ``DEBUG``, ``INFO``, ``WARNING``,
        ``ERROR``, ``CRITICAL``.
    locale:
        Language of user-visible MCP strings.  One of the supported locales.
    uri_scheme:
        Scheme used for resource URIs (``<scheme>://<id>``).
    seed_defaults:
        Whether to preload the demo entries at startup.
    seed_path:
        Optional JSON file with additional entries loaded at startup.
    http_host / http_port:
        Bind address of the HTTP stub API.
    api_prefix:
        Base path under which the stub route families are mounted.
    cors_origins:
        Origins allowed by the HTTP stub API's CORS middleware.
    """

    server_name: str = Field(
        default="todo",
        min_length=1,
        description="Name advertised by the MCP server.",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL.",
    )
    locale: str = Field(
        default="en",
        description="Locale of user-visible MCP strings.",
    )
    uri_scheme: str = Field(
        default="todo",
        description="URI scheme for catalog resources.",
    )
    seed_defaults: bool = Field(
        default=True,
        description="Preload the demo entries at startup.",
    )
    seed_path: Optional[str] = Field(
        default=None,
        description="JSON file with entries to preload at startup.",
    )
    http_host: str = Field(
        default="127.0.0.1",
        description="Bind host of the HTTP stub API.",
    )
    http_port: int = Field(
        default=8787,
        ge=1,
        le=65535,
        description="Bind port of the HTTP stub API.",
    )
    api_prefix: str = Field(
        default="/api",
        description="Base path of the HTTP stub route families.",
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed by the CORS middleware.",
    )

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @field_validator("locale")
    @classmethod
    def validate_locale(cls, value: str) -> str:
        normalised = value.lower().strip()
        if normalised not in SUPPORTED_LOCALES:
            raise ValueError(
                f"Invalid locale '{value}'. "
                f"Must be one of: {', '.join(SUPPORTED_LOCALES)}."
            )
        return normalised

    @field_validator("uri_scheme")
    @classmethod
    def validate_uri_scheme(cls, value: str) -> str:
        normalised = value.lower().strip()
        if not _URI_SCHEME_RE.match(normalised):
            raise ValueError(f"Invalid uri_scheme '{value}'.")
        return normalised

    @field_validator("api_prefix")
    @classmethod
    def validate_api_prefix(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError(f"api_prefix must start with '/': {value!r}")
        return value.rstrip("/") or "/"

    @model_validator(mode="after")
    def validate_log_level(self) -> "CatalogConfig":
        """Normalise and validate the log level string."""
        normalised = self.log_level.upper().strip()
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if normalised not in valid_levels:
            raise ValueError(
                f"Invalid log_level '{self.log_level}'. "
                f"Must be one of: {', '.join(sorted(valid_levels))}."
            )
        self.log_level = normalised
        return self

    @model_validator(mode="after")
    def resolve_seed_path(self) -> "CatalogConfig":
        if self.seed_path is not None:
            self.seed_path = str(Path(self.seed_path).resolve())
        return self

    # ------------------------------------------------------------------
    # Factory: load from file + environment
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "CatalogConfig":
        """Load configuration with full resolution: env -> file -> defaults.

        Parameters
        ----------
        config_path:
            Explicit path to a JSON config file.  When *None*, the file
            ``todo-catalog.json`` in the current working directory is used
            if it exists.

        Returns
        -------
        CatalogConfig
            Fully resolved configuration object.
        """
        merged: dict = {}
        merged.update(_load_config_file(config_path))
        merged.update(_load_env_overrides())
        return cls.model_validate(merged)

    # ------------------------------------------------------------------
    # Persistence: save config to disk
    # ------------------------------------------------------------------

    def save(self, config_path: Optional[str] = None) -> Path:
        """Save the current configuration to a JSON file.

        Parameters
        ----------
        config_path:
            Explicit file path.  When *None*, writes ``todo-catalog.json``
            in the current working directory.

        Returns
        -------
        Path
            The path to the written file.
        """
        if config_path is not None:
            target = Path(config_path).resolve()
        else:
            target = Path.cwd() / DEFAULT_CONFIG_FILE_NAME

        target.parent.mkdir(parents=True, exist_ok=True)

        data = self.model_dump(exclude_none=True)
        with open(target, "w", encoding="utf-8") as fp:
            json.dump(data, fp, indent=2, ensure_ascii=False)
            fp.write("\n")

        logger.info("Saved configuration to %s", target)
        return target

    # ------------------------------------------------------------------
    # Utility
    # ------------------------------------------------------------------

    def configure_logging(self) -> None:
        """Apply the configured log level to the ``todo_catalog_mcp`` logger.

        Installs a single stderr handler; stdout is reserved for the MCP
        stdio transport.  Calling it more than once only updates the level.
        """
        pkg_logger = logging.getLogger(PACKAGE_LOGGER)
        pkg_logger.setLevel(self.log_level)

        if not pkg_logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
            handler.setFormatter(formatter)
            pkg_logger.addHandler(handler)

        for handler in pkg_logger.handlers:
            handler.setLevel(self.log_level)

    def to_dict(self) -> dict:
        """Return all configuration values as a plain dictionary."""
        return self.model_dump()

    def __repr__(self) -> str:
        return (
            f"CatalogConfig("
            f"server_name={self.server_name!r}, "
            f"locale={self.locale!r}, "
            f"uri_scheme={self.uri_scheme!r}, "
            f"log_level={self.log_level!r}, "
            f"seed_defaults={self.seed_defaults}, "
            f"seed_path={self.seed_path!r}"
            f")"
        )


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _load_config_file(config_path: Optional[str] = None) -> dict:
    """Read a JSON config file and return its contents as a dict.

    Returns an empty dict if the file does not exist or is malformed.
    """
    if config_path is not None:
        path = Path(config_path).resolve()
    else:
        path = Path.cwd() / DEFAULT_CONFIG_FILE_NAME

    if not path.is_file():
        logger.debug("No config file at %s. Using defaults.", path)
        return {}

    try:
        with open(path, "r", encoding="utf-8") as fp:
            data = json.load(fp)
        if not isinstance(data, dict):
            logger.warning(
                "Config file %s does not contain a JSON object. Ignoring.",
                path,
            )
            return {}
        logger.info("Loaded configuration from %s", path)
        return data
    except json.JSONDecodeError:
        logger.warning(
            "Config file %s contains invalid JSON. Ignoring.",
            path,
            exc_info=True,
        )
        return {}
    except OSError:
        logger.warning(
            "Could not read config file %s. Ignoring.",
            path,
            exc_info=True,
        )
        return {}


def _load_env_overrides() -> dict:
    """Read ``TODO_CATALOG_*`` environment variables and return overrides.

    Supported variables:

    - ``TODO_CATALOG_SERVER_NAME``
    - ``TODO_CATALOG_LOG_LEVEL``
    - ``TODO_CATALOG_LOCALE``
    - ``TODO_CATALOG_URI_SCHEME``
    - ``TODO_CATALOG_SEED_DEFAULTS`` (``true``/``false``)
    - ``TODO_CATALOG_SEED_PATH``
    - ``TODO_CATALOG_HTTP_HOST``
    - ``TODO_CATALOG_HTTP_PORT`` (integer)
    - ``TODO_CATALOG_API_PREFIX``
    - ``TODO_CATALOG_CORS_ORIGINS`` (comma-separated)

    Returns a dict of field_name -> value for any variables that are set.
    """
    overrides: dict = {}

    for env_key, field_name in (
        ("SERVER_NAME", "server_name"),
        ("LOG_LEVEL", "log_level"),
        ("LOCALE", "locale"),
        ("URI_SCHEME", "uri_scheme"),
        ("SEED_PATH", "seed_path"),
        ("HTTP_HOST", "http_host"),
        ("API_PREFIX", "api_prefix"),
    ):
        val = os.environ.get(f"{ENV_PREFIX}{env_key}")
        if val is not None:
            overrides[field_name] = val

    seed_defaults = os.environ.get(f"{ENV_PREFIX}SEED_DEFAULTS")
    if seed_defaults is not None:
        overrides["seed_defaults"] = seed_defaults.lower() in _TRUE_VALUES

    http_port = os.environ.get(f"{ENV_PREFIX}HTTP_PORT")
    if http_port is not None:
        try:
            overrides["http_port"] = int(http_port)
        except ValueError:
            logger.warning(
                "Invalid %sHTTP_PORT value: %r. Must be an integer. Ignoring.",
                ENV_PREFIX,
                http_port,
            )

    cors_origins = os.environ.get(f"{ENV_PREFIX}CORS_ORIGINS")
    if cors_origins is not None:
        overrides["cors_origins"] = [
            origin.strip() for origin in cors_origins.split(",") if origin.strip()
        ]

    if overrides:
        logger.info(
            "Environment overrides applied: %s",
            ", ".join(overrides.keys()),
        )

    return overrides
