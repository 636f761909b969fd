"""
Data models shared by the query pipeline.
"""
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import List, Optional, Dict, Tuple, Union, Any
from urllib.parse import urlencode

ParamValue = Union[str, List[str]]


class DefType(str, Enum):
    DISMAX = "dismax"
    EDISMAX = "edismax"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass
class DateRangeConfig:
    start: Optional[str] = None
    end: Optional[str] = None
    gap: Optional[str] = None
    slider_enabled: bool = False


@dataclass
class FacetConfig:
    """A configured facet field, either a plain count facet or a date-range facet."""
    field: str
    label: str = ""
    is_date_range: bool = False
    sort: Optional[str] = None  # "index" | "count"
    date_range: Optional[DateRangeConfig] = None


@dataclass
class HighlightConfig:
    fields: List[str]
    fragment_size: int = 400
    pre_tag: str = '<span class="solr-highlight">'
    post_tag: str = "</span>"


@dataclass
class QuerySpec:
    """
    A fully merged Solr request.

    Built by the query builder, optionally altered by hooks, then handed to the
    executor. ``start`` is derived from ``page`` and ``rows``; call
    ``recompute_start`` after changing either.
    """
    raw_query: str
    effective_query: str
    rows: int
    page: int = 0
    start: int = 0
    def_type: Optional[DefType] = None
    sort: List[Tuple[str, SortOrder]] = field(default_factory=list)
    filters: List[str] = field(default_factory=list)
    params: Dict[str, ParamValue] = field(default_factory=dict)
    internal_params: Dict[str, Any] = field(default_factory=dict)
    display: str = "default"
    navigation_enabled: bool = False

    def recompute_start(self) -> int:
        self.start = max(0, self.page) * self.rows
        return self.start

    def to_solr_params(self) -> Dict[str, ParamValue]:
        """Flatten sort, filters and defType into the parameter map sent to Solr."""
        solr_params: Dict[str, ParamValue] = dict(self.params)
        solr_params.pop("defType", None)
        if self.def_type is not None:
            solr_params["defType"] = self.def_type.value
        if self.sort:
            solr_params["sort"] = ",".join(f"{name} {order.value}" for name, order in self.sort)
        if self.filters:
            solr_params["fq"] = list(self.filters)
        return solr_params

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["def_type"] = self.def_type.value if self.def_type else None
        data["sort"] = [[name, order.value] for name, order in self.sort]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QuerySpec":
        data = dict(data)
        def_type = data.pop("def_type", None)
        sort = data.pop("sort", None) or []
        return cls(
            def_type=DefType(def_type) if def_type else None,
            sort=[(name, SortOrder(order)) for name, order in sort],
            **data,
        )


@dataclass
class ResultItem:
    """One Solr document tailored for display."""
    id: str
    raw_fields: Dict[str, Any]
    content_models: List[str] = field(default_factory=list)
    datastreams: List[str] = field(default_factory=list)
    label: str = ""
    canonical_url: str = ""
    thumbnail_url: str = ""
    navigation_params: Dict[str, Any] = field(default_factory=dict)

    def _with_params(self, url: str) -> str:
        nav = self.navigation_params.get("search_nav")
        if not nav:
            return url
        query = urlencode({f"search_nav[{key}]": value for key, value in nav.items()})
        return f"{url}?{query}"

    @property
    def canonical_url_with_params(self) -> str:
        return self._with_params(self.canonical_url)

    @property
    def thumbnail_url_with_params(self) -> str:
        return self._with_params(self.thumbnail_url)


@dataclass(frozen=True)
class SearchResultSet:
    total_found: int
    items: Tuple[ResultItem, ...]
    spec: QuerySpec
    facets: Dict[str, Any] = field(default_factory=dict)
    highlighting: Dict[str, Any] = field(default_factory=dict)
    navigation_token: Optional[str] = None


@dataclass
class NavigationRecord:
    token: str
    spec: QuerySpec
    created_at: float
    path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "token": self.token,
            "spec": self.spec.to_dict(),
            "created_at": self.created_at,
            "path": self.path,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NavigationRecord":
        return cls(
            token=data["token"],
            spec=QuerySpec.from_dict(data["spec"]),
            created_at=float(data["created_at"]),
            path=data.get("path"),
        )


@dataclass
class NavigationContext:
    """Where a single item sits inside a previously executed search."""
    token: str
    offset: int
    position: int
    total_found: int
    current_id: Optional[str] = None
    previous_id: Optional[str] = None
    next_id: Optional[str] = None
