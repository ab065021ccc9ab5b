"""Catalog configuration: variant presets, YAML file and environment variables.

Environment variables:
    IMGCATALOG_DATABASE: Path to the SQLite catalog
    ENRICHMENT_API_URL: Base URL of the generation API (default: http://localhost:11434)
    ENRICHMENT_MODEL: Vision model name (default: "llava")
    ENRICHMENT_TIMEOUT: Request timeout in seconds, "none" to wait indefinitely
"""

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Optional

import yaml

from .api.enrichment_api import DEFAULT_API_URL, DEFAULT_MODEL, DEFAULT_PROMPT, DEFAULT_TIMEOUT
from .core.errors import ConfigError
from .core.filters import DEFAULT_EXTENSIONS


@dataclass
class CatalogConfig:
    """Settings for one catalog run."""

    database: str = "image_catalog.db"
    directory: str = "./images"
    create_directory: bool = True
    extensions: list[str] = field(default_factory=lambda: sorted(DEFAULT_EXTENSIONS))
    enrich: bool = False
    skip_undecodable: bool = True
    api_url: str = DEFAULT_API_URL
    model: str = DEFAULT_MODEL
    prompt: str = DEFAULT_PROMPT
    timeout: Optional[float] = DEFAULT_TIMEOUT


VARIANTS = {
    # metadata only; files Pillow cannot decode are not stored
    "basic": CatalogConfig(),
    # description + keywords from the vision model; every candidate is stored
    "extended": CatalogConfig(
        database="photo_catalog.db",
        directory=".",
        create_directory=False,
        enrich=True,
        skip_undecodable=False,
    ),
}

# YAML "enrichment:" sub-keys -> CatalogConfig fields
_ENRICHMENT_KEYS = {"url": "api_url", "model": "model", "prompt": "prompt", "timeout": "timeout"}

# Expected YAML value types; extensions and timeout are parsed separately
_SETTING_TYPES = {
    "database": str,
    "directory": str,
    "api_url": str,
    "model": str,
    "prompt": str,
    "create_directory": bool,
    "enrich": bool,
    "skip_undecodable": bool,
}


def parse_timeout(value) -> Optional[float]:
    """Parse a timeout setting; "none", "0" and null disable the timeout."""
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() in ("", "none", "null"):
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid timeout: {value!r}")
    if timeout < 0:
        raise ConfigError(f"Invalid timeout: {value!r}")
    return timeout or None


def load_yaml(config_path: str | Path) -> dict:
    """Load configuration overrides from a YAML file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a mapping: {config_path}")

    known = {f.name for f in fields(CatalogConfig)}
    overrides = {}
    for key, value in data.items():
        if key == "enrichment":
            if not isinstance(value, dict):
                raise ConfigError("'enrichment' must be a mapping")
            for sub_key, sub_value in value.items():
                if sub_key not in _ENRICHMENT_KEYS:
                    raise ConfigError(f"Unknown enrichment setting: {sub_key}")
                overrides[_ENRICHMENT_KEYS[sub_key]] = sub_value
        elif key in known:
            overrides[key] = value
        else:
            raise ConfigError(f"Unknown setting: {key}")

    for key, expected in _SETTING_TYPES.items():
        if key in overrides and not isinstance(overrides[key], expected):
            raise ConfigError(
                f"Invalid value for '{key}': expected {expected.__name__}, got {overrides[key]!r}"
            )
    for key in ("database", "directory"):
        if key in overrides and not overrides[key].strip():
            raise ConfigError(f"'{key}' must not be empty")

    if "extensions" in overrides:
        extensions = overrides["extensions"]
        if not isinstance(extensions, list) or not extensions:
            raise ConfigError("'extensions' must be a non-empty list")
        overrides["extensions"] = [str(e) for e in extensions]
    if "timeout" in overrides:
        overrides["timeout"] = parse_timeout(overrides["timeout"])
    return overrides


def env_overrides() -> dict:
    """Collect configuration overrides from environment variables."""
    overrides = {}
    if os.environ.get("IMGCATALOG_DATABASE"):
        overrides["database"] = os.environ["IMGCATALOG_DATABASE"]
    if os.environ.get("ENRICHMENT_API_URL"):
        overrides["api_url"] = os.environ["ENRICHMENT_API_URL"]
    if os.environ.get("ENRICHMENT_MODEL"):
        overrides["model"] = os.environ["ENRICHMENT_MODEL"]
    if "ENRICHMENT_TIMEOUT" in os.environ:
        overrides["timeout"] = parse_timeout(os.environ["ENRICHMENT_TIMEOUT"])
    return overrides


def load_config(
    variant: str = "basic",
    config_path: str | Path | None = None,
    **overrides,
) -> CatalogConfig:
    """Build the effective configuration.

    Precedence, lowest first: variant preset, YAML file, environment,
    explicit keyword overrides (None values are ignored).

    Raises:
        ConfigError: If the variant is unknown or a setting is invalid
    """
    if variant not in VARIANTS:
        raise ConfigError(f"Unknown variant: {variant}")

    config = VARIANTS[variant]
    if config_path is not None:
        config = replace(config, **load_yaml(config_path))
    config = replace(config, **env_overrides())
    config = replace(config, **{k: v for k, v in overrides.items() if v is not None})
    return config
