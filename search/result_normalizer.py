from typing import Any, Dict, List, Optional
from urllib.parse import quote

from config.search_config import SearchSettings
from search.models import QuerySpec, ResultItem


def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [str(value)]


class ResultNormalizer:
    """
    Turns raw Solr documents into ResultItems.

    Every item keeps its raw document and gains a label, an object link, a
    thumbnail link and, when search navigation is on, the parameters a single
    object page needs to find its way back into the result set.
    """

    def __init__(self, settings: SearchSettings):
        self.settings = settings

    def object_url(self, object_id: str) -> str:
        return f"{self.settings.base_url}/object/{quote(object_id, safe=':')}"

    def datastream_url(self, object_id: str, datastream: str) -> str:
        return f"{self.object_url(object_id)}/datastream/{quote(datastream)}/view"

    def placeholder_url(self) -> str:
        return f"{self.settings.base_url}{self.settings.placeholder_image_path}"

    def thumbnail_url(self, object_id: str, doc: Dict[str, Any]) -> str:
        # No datastream list means we cannot rule the thumbnail out
        datastreams = doc.get(self.settings.datastream_id_field)
        if datastreams is None or self.settings.thumbnail_datastream in _as_list(datastreams):
            return self.datastream_url(object_id, self.settings.thumbnail_datastream)
        return self.placeholder_url()

    def label(self, doc: Dict[str, Any]) -> str:
        value = doc.get(self.settings.object_label_field)
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            return ", ".join(str(v) for v in value)
        return str(value)

    def normalize(self, docs: List[Dict[str, Any]], spec: QuerySpec,
                  navigation_token: Optional[str] = None) -> List[ResultItem]:
        items = []
        for index, doc in enumerate(docs):
            object_id = str(doc.get(self.settings.identifier_field, ""))

            navigation_params = {}
            if spec.navigation_enabled and navigation_token:
                navigation_params = {
                    "search_nav": {
                        "token": navigation_token,
                        "page": spec.page,
                        "offset": index,
                    }
                }

            items.append(ResultItem(
                id=object_id,
                raw_fields=doc,
                content_models=_as_list(doc.get(self.settings.content_model_field)),
                datastreams=_as_list(doc.get(self.settings.datastream_id_field)),
                label=self.label(doc),
                canonical_url=self.object_url(object_id),
                thumbnail_url=self.thumbnail_url(object_id, doc),
                navigation_params=navigation_params,
            ))
        return items
