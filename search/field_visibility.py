"""
Limits the raw Solr fields shown for each result to the ones the current
caller is allowed to see.
"""
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional

from search.models import ResultItem

VisibilityPolicy = Callable[[str], bool]


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or (isinstance(value, (list, tuple, dict)) and not value)


class FieldVisibilityFilter:

    def __init__(self, result_fields: List[str], is_visible: Optional[VisibilityPolicy] = None,
                 limit_fields: bool = False):
        """
        Args:
            result_fields: Every configured result field, in display order.
            is_visible: Policy deciding whether the caller may see a field.
                Defaults to allowing everything.
            limit_fields: Only keep configured fields when True.
        """
        self.result_fields = list(result_fields)
        self.is_visible = is_visible or (lambda name: True)
        self.limit_fields = limit_fields

    @property
    def visible_fields(self) -> List[str]:
        return [name for name in self.result_fields if self.is_visible(name)]

    def filter_fields(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        visible = self.visible_fields
        hidden = set(self.result_fields) - set(visible)

        rows = {}
        # 1: configured fields, in configured order
        for name in visible:
            if name in doc and not _is_empty(doc[name]):
                rows[name] = doc[name]

        # 2: everything else, unless limited
        if not self.limit_fields:
            for name, value in doc.items():
                if name in rows or name in hidden:
                    continue
                rows[name] = value
        return rows

    def apply(self, item: ResultItem) -> ResultItem:
        return replace(item, raw_fields=self.filter_fields(item.raw_fields))

    def apply_all(self, items: List[ResultItem]) -> List[ResultItem]:
        return [self.apply(item) for item in items]
