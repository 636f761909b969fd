"""
Builds the Solr request for a search page.

Merges the query text and URL parameters with the site search settings into a
QuerySpec. Nothing here performs I/O.
"""
import re
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union
from urllib.parse import unquote_plus

from config.logging_config import logger
from config.search_config import SearchSettings
from search.hooks import HookRegistry
from search.models import DefType, QuerySpec, SortOrder, ParamValue

# Query strings that mean "no query at all"
EMPTY_QUERIES = (" ", "%20", "%252F", "%2F", "%252F-", "")

SLASH_REPLACEMENT = "~slsh~"

DATE_FACET_DEFAULTS = {
    "facet.date.start": "NOW/YEAR-20YEARS",
    "facet.date.end": "NOW",
    "facet.date.gap": "+1YEAR",
}


def restore_slashes(query: str) -> str:
    return query.replace(SLASH_REPLACEMENT, "/")


def normalize_query(query: Optional[str]) -> Optional[str]:
    """Decode the query text. Returns None when it is one of the empty forms."""
    if query is None:
        return None
    if query in EMPTY_QUERIES:
        return None
    decoded = restore_slashes(unquote_plus(query))
    if decoded in EMPTY_QUERIES:
        return None
    return decoded


def parse_sort_entry(entry: str, split_regex: str = r"(?<!\\) ") -> Optional[Tuple[str, SortOrder]]:
    """
    Parse "field order" into a (field, SortOrder) tuple.

    The order token is only honoured when it is exactly "asc" or "desc";
    anything else sorts ascending on the field.
    """
    tokens = [t for t in re.split(split_regex, entry.strip()) if t]
    if not tokens:
        return None
    if len(tokens) > 1 and tokens[1] in ("asc", "desc"):
        return tokens[0], SortOrder(tokens[1])
    return tokens[0], SortOrder.ASC


def parse_sort(sort: Union[str, List[str], None], settings: SearchSettings) -> List[Tuple[str, SortOrder]]:
    if sort is None:
        base_sort = (settings.base_sort or "").strip()
        if not base_sort:
            return []
        entries = base_sort.split(",")
    elif isinstance(sort, (list, tuple)):
        entries = list(sort)
    else:
        entries = [sort]

    parsed = []
    for entry in entries:
        if isinstance(entry, (list, tuple)) and entry:
            entry = " ".join(str(part) for part in entry)
        result = parse_sort_entry(str(entry), settings.query_split_regex)
        if result:
            parsed.append(result)
    return parsed


def _positive_int(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def _page_number(value: Any) -> int:
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0


def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value else []
    return [str(v) for v in value if v]


def build_facet_params(settings: SearchSettings) -> Dict[str, ParamValue]:
    """Facet counts for the configured fields, with date fields faceted by range."""
    standard, date_facets = settings.facet_configs()

    params: Dict[str, ParamValue] = {
        "facet": "true",
        "facet.mincount": str(settings.facet_min_limit),
        "facet.limit": str(settings.facet_max_limit),
        "facet.field": [facet.field for facet in standard],
    }

    if date_facets:
        params["facet.date"] = []
        for facet in date_facets:
            name = facet.field
            date_range = facet.date_range
            params["facet.date"].append(name)
            if date_range.start:
                params[f"f.{name}.facet.date.start"] = date_range.start
            if date_range.end:
                params[f"f.{name}.facet.date.end"] = date_range.end
            if date_range.gap:
                params[f"f.{name}.facet.date.gap"] = date_range.gap
            # The range slider needs the empty buckets too
            if date_range.slider_enabled:
                params[f"f.{name}.facet.mincount"] = "0"
        params.update(DATE_FACET_DEFAULTS)

    default_sort = "index" if settings.facet_max_limit <= 0 else "count"
    for facet in standard + date_facets:
        if facet.sort and facet.sort != default_sort:
            params[f"f.{facet.field}.facet.sort"] = facet.sort

    return params


def build_highlight_params(settings: SearchSettings) -> Dict[str, ParamValue]:
    highlight = settings.highlight_config()
    if highlight is None:
        return {}
    return {
        "hl": "true",
        "hl.fl": ",".join(highlight.fields),
        "hl.fragsize": str(highlight.fragment_size),
        "hl.simple.pre": highlight.pre_tag,
        "hl.simple.post": highlight.post_tag,
    }


def build_filters(url_params: Mapping[str, Any], settings: SearchSettings) -> List[str]:
    """
    URL filters first, then the configured base filters, then hidden filters
    (filters injected by other code that should not show in the breadcrumbs).
    A namespace restriction adds one OR-combined clause at the end.
    """
    filters = _as_list(url_params.get("f"))
    filters += settings.base_filters
    filters += _as_list(url_params.get("hidden_filter"))

    namespaces = settings.namespaces
    if namespaces:
        field = settings.identifier_field
        filters.append(" OR ".join(f"{field}:{ns}\\:*" for ns in namespaces))
    return filters


def build_query(raw_query: Optional[str], url_params: Optional[Mapping[str, Any]],
                settings: SearchSettings, hooks: Optional[HookRegistry] = None,
                handler_has_query_fields: Optional[Callable[[], bool]] = None) -> QuerySpec:
    """
    Build the QuerySpec for a search request.

    Args:
        raw_query: The query text from the URL (may still be URL encoded).
        url_params: All URL parameters of the search page.
        settings: Site search settings.
        hooks: Registered query-alter hooks, run once after construction.
        handler_has_query_fields: Tells whether the Solr request handler already
            defines ``qf``. Defaults to ``settings.request_handler_has_qf``.

    Returns:
        QuerySpec: The merged request, with ``start`` consistent with ``rows``.
    """
    url_params = dict(url_params or {})
    internal_params = {k: v for k, v in url_params.items() if k not in ("q", "page")}
    params: Dict[str, ParamValue] = {}

    requested_type = internal_params.get("type")
    def_type = None
    if requested_type in (DefType.DISMAX.value, DefType.EDISMAX.value):
        def_type = DefType(requested_type)
        params["defType"] = def_type.value

    query = normalize_query(raw_query)
    if query is None:
        # Empty queries run the base query; dismax cannot handle them
        raw_query_text = " "
        effective_query = settings.base_query or "*:*"
        def_type = None
        params.pop("defType", None)
    else:
        raw_query_text = query
        effective_query = query

    sort = parse_sort(internal_params.get("sort"), settings)
    rows = _positive_int(internal_params.get("limit"), _positive_int(settings.num_of_results, 20))
    page = _page_number(url_params.get("page", 0))

    params.update(build_facet_params(settings))
    if settings.request_handler:
        params["qt"] = settings.request_handler
    params.update(build_highlight_params(settings))

    if requested_type in (DefType.DISMAX.value, DefType.EDISMAX.value) and settings.query_fields:
        has_qf = handler_has_query_fields() if handler_has_query_fields else settings.request_handler_has_qf
        if settings.use_ui_qf or not has_qf:
            params["qf"] = settings.query_fields

    spec = QuerySpec(
        raw_query=raw_query_text,
        effective_query=effective_query,
        rows=rows,
        page=page,
        def_type=def_type,
        sort=sort,
        filters=build_filters(url_params, settings),
        params=params,
        internal_params=internal_params,
        display=str(internal_params.get("display") or settings.primary_display),
        navigation_enabled=settings.search_navigation,
    )
    spec.recompute_start()

    if hooks is not None:
        hooks.alter_query(spec)

    # Hooks may have changed rows or page
    spec.rows = _positive_int(spec.rows, _positive_int(settings.num_of_results, 20))
    spec.page = max(0, spec.page)
    spec.recompute_start()

    if settings.debug_mode:
        logger.debug(f"Solr parameters for '{spec.effective_query}': {spec.to_solr_params()}")

    return spec
