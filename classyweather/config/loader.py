"""YAML config loader with dotted-key lookup."""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel

from classyweather.config.schema import WidgetConfig

logger = logging.getLogger(__name__)


def load_config(path: str | Path) -> WidgetConfig:
    """Load and validate config from a YAML file.

    A missing or empty file yields the defaults.
    """
    path = Path(path)
    if not path.exists():
        logger.debug("Config %s not found, using defaults", path)
        return WidgetConfig()
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    return WidgetConfig(**raw)


def get_config_value(config: WidgetConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'search.debounce_ms'."""
    obj: Any = config
    for part in dotted_key.split("."):
        if isinstance(obj, dict) and part in obj:
            obj = obj[part]
        elif isinstance(obj, BaseModel) and part in type(obj).model_fields:
            obj = getattr(obj, part)
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj
