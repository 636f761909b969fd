"""
Site-wide search settings: the admin-configured part of every query.
"""
import re
from typing import List, Optional, Literal, Tuple

from pydantic import BaseModel

from config.settings import SITE_BASE_URL
from search.models import FacetConfig, DateRangeConfig, HighlightConfig


class FacetFieldSettings(BaseModel):
    solr_field: str
    label: str = ""
    sort_by: Optional[Literal["index", "count"]] = None
    date_range: bool = False
    range_facet_start: Optional[str] = None
    range_facet_end: Optional[str] = None
    range_facet_gap: Optional[str] = None
    range_facet_slider_enabled: bool = False


class SearchSettings(BaseModel):
    # Query defaults
    num_of_results: int = 20
    base_query: str = "*:*"
    base_sort: str = ""
    base_filter: str = ""
    namespace_restriction: str = ""
    query_split_regex: str = r"(?<!\\) "

    # Request handler / dismax
    request_handler: str = ""
    request_handler_has_qf: bool = False
    query_fields: str = ""
    use_ui_qf: bool = False

    # Facets
    facet_min_limit: int = 2
    facet_max_limit: int = 20
    facet_fields: List[FacetFieldSettings] = []

    # Highlighting
    snippet_fields: List[str] = []

    # Result document fields
    identifier_field: str = "PID"
    content_model_field: str = "RELS_EXT_hasModel_uri_ms"
    datastream_id_field: str = "fedora_datastreams_ms"
    object_label_field: str = "fgs_label_s"
    thumbnail_datastream: str = "TN"
    result_fields: List[str] = []
    limit_result_fields: bool = False

    # Links
    base_url: str = SITE_BASE_URL
    placeholder_image_path: str = "/static/images/defaultimg.png"

    # Display / navigation
    primary_display: str = "default"
    enabled_displays: List[str] = ["default"]
    search_navigation: bool = False
    debug_mode: bool = False

    @property
    def base_filters(self) -> List[str]:
        return [line for line in re.split(r"\r\n|\n|\r", self.base_filter) if line]

    @property
    def namespaces(self) -> List[str]:
        return [ns for ns in re.split(r"[,|\s]", self.namespace_restriction.strip()) if ns]

    def facet_configs(self) -> Tuple[List[FacetConfig], List[FacetConfig]]:
        """Split the configured facet fields into (standard, date_range) facets."""
        standard, date_range = [], []
        for facet in self.facet_fields:
            if facet.date_range:
                date_range.append(FacetConfig(
                    field=facet.solr_field,
                    label=facet.label,
                    is_date_range=True,
                    sort=facet.sort_by,
                    date_range=DateRangeConfig(
                        start=facet.range_facet_start,
                        end=facet.range_facet_end,
                        gap=facet.range_facet_gap,
                        slider_enabled=facet.range_facet_slider_enabled,
                    ),
                ))
        date_fields = {facet.field for facet in date_range}
        for facet in self.facet_fields:
            if facet.date_range or facet.solr_field in date_fields:
                continue
            standard.append(FacetConfig(field=facet.solr_field, label=facet.label, sort=facet.sort_by))
        return standard, date_range

    def highlight_config(self) -> Optional[HighlightConfig]:
        fields = [f for f in self.snippet_fields if f]
        if not fields:
            return None
        return HighlightConfig(fields=fields)
