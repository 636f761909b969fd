"""
Result display profiles.

The set of profiles is closed: a requested profile is used only when it is a
known, enabled member, otherwise the configured primary display, otherwise
the default list.
"""
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from config.logging_config import logger
from config.search_config import SearchSettings
from search.models import SearchResultSet


class DisplayProfile(str, Enum):
    DEFAULT = "default"
    GRID = "grid"
    TABLE = "table"


def _parse_profile(name: Optional[str]) -> Optional[DisplayProfile]:
    try:
        return DisplayProfile(name)
    except ValueError:
        return None


def select_display(requested: Optional[str], settings: SearchSettings) -> DisplayProfile:
    enabled = {p for p in (_parse_profile(name) for name in settings.enabled_displays) if p}

    profile = _parse_profile(requested)
    if profile is not None and profile in enabled:
        return profile

    primary = _parse_profile(settings.primary_display)
    if primary is not None:
        return primary

    logger.error(f"Display profile '{settings.primary_display}' not found, using the default display")
    return DisplayProfile.DEFAULT


def render_default(result_set: SearchResultSet) -> List[Dict[str, Any]]:
    return [
        {
            "id": item.id,
            "label": item.label,
            "url": item.canonical_url_with_params,
            "thumbnail": item.thumbnail_url_with_params,
            "fields": item.raw_fields,
        }
        for item in result_set.items
    ]


def render_grid(result_set: SearchResultSet) -> List[Dict[str, Any]]:
    return [
        {
            "id": item.id,
            "label": item.label,
            "url": item.canonical_url_with_params,
            "thumbnail": item.thumbnail_url_with_params,
        }
        for item in result_set.items
    ]


def render_table(result_set: SearchResultSet) -> Dict[str, Any]:
    columns: List[str] = []
    for item in result_set.items:
        for name in item.raw_fields:
            if name not in columns:
                columns.append(name)
    rows = [[item.raw_fields.get(name) for name in columns] for item in result_set.items]
    return {"columns": columns, "rows": rows}


RENDERERS: Dict[DisplayProfile, Callable[[SearchResultSet], Any]] = {
    DisplayProfile.DEFAULT: render_default,
    DisplayProfile.GRID: render_grid,
    DisplayProfile.TABLE: render_table,
}


def render(result_set: SearchResultSet, profile: DisplayProfile) -> Any:
    return RENDERERS.get(profile, render_default)(result_set)
