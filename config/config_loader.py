import os, yaml, re
from typing import Optional

from pydantic import ValidationError

from config.logging_config import logger
from config.search_config import SearchSettings
from config.settings import SEARCH_CONFIG_PATH


def _expand_env(value):
    """Expand ${VAR} references inside strings, lists and mappings."""
    if isinstance(value, str):
        match = re.fullmatch(r"\$\{(\w+)\}", value)
        if match:
            env_var = match.group(1)
            env_value = os.getenv(env_var)
            if env_value is None:
                raise ValueError(f"❌ Missing environment variable: {env_var}")
            return env_value
        return value
    if isinstance(value, list):
        return [_expand_env(v) for v in value]
    if isinstance(value, dict):
        return {k: _expand_env(v) for k, v in value.items()}
    return value


def load_search_config(config_path: Optional[str] = None) -> SearchSettings:
    """
    Load the site search configuration from YAML.

    The file holds a top-level ``search`` mapping. Environment variables in the
    form ${VAR} are expanded. A missing file, or any individual setting that
    fails validation, falls back to its default and is logged.
    """
    config_path = config_path or os.getenv("SEARCH_CONFIG_PATH", SEARCH_CONFIG_PATH)

    if not os.path.exists(config_path):
        logger.warning(f"Search config not found at {config_path}, using defaults")
        return SearchSettings()

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError("❌ Invalid config: expected a mapping at the top level")

    values = raw.get("search") or {}
    if not isinstance(values, dict):
        raise ValueError("❌ Invalid config: 'search' must be a mapping")

    values = _expand_env(values)

    while True:
        try:
            settings = SearchSettings(**values)
            break
        except ValidationError as e:
            invalid = {err["loc"][0] for err in e.errors() if err["loc"]}
            invalid &= set(values)
            if not invalid:
                raise
            for key in sorted(invalid):
                logger.warning(f"Invalid search setting '{key}', falling back to default")
                values.pop(key)

    logger.info(f"✅ Loaded search config from {config_path} "
                f"({len(settings.facet_fields)} facets, {len(settings.result_fields)} result fields)")
    return settings
