from typing import Any, Dict, Optional

from cache.navigation_store import NavigationSession
from config.logging_config import logger
from search.field_visibility import FieldVisibilityFilter
from search.hooks import HookRegistry
from search.models import QuerySpec, SearchResultSet
from search.result_normalizer import ResultNormalizer
from search.solr_client import SolrClient, SolrClientError
from utils.timing import Timer


class ExecutionError(Exception):
    """The search backend call failed. No result set was produced."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def _validate_payload(payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, dict) or not isinstance(payload.get("response"), dict):
        raise ExecutionError("Error searching Solr index: missing 'response' section")
    response = payload["response"]
    if not isinstance(response.get("numFound"), int) or isinstance(response.get("numFound"), bool):
        raise ExecutionError("Error searching Solr index: missing 'numFound'")
    if not isinstance(response.get("docs"), list):
        raise ExecutionError("Error searching Solr index: missing 'docs'")
    return response


class QueryExecutor:
    """
    Runs a QuerySpec against Solr and shapes the response into a SearchResultSet.

    Order after a successful call: result observers, navigation registration,
    normalization, per content model hooks, global result hooks, field
    visibility filtering.
    """

    def __init__(self, client: SolrClient, normalizer: ResultNormalizer,
                 visibility_filter: FieldVisibilityFilter, hooks: Optional[HookRegistry] = None):
        self.client = client
        self.normalizer = normalizer
        self.visibility_filter = visibility_filter
        self.hooks = hooks or HookRegistry()

    def execute(self, spec: QuerySpec, use_post: bool = False, alter_results: bool = True,
                navigation: Optional[NavigationSession] = None, path: Optional[str] = None) -> SearchResultSet:
        """
        Args:
            spec: The query to run.
            use_post: Send the request as POST instead of GET.
            alter_results: Run the result hooks and the field visibility filter.
            navigation: Session-bound navigation store; a token is registered
                when the QuerySpec enables navigation and Solr returned documents.
            path: Page the search was run from, kept with the navigation record.

        Raises:
            ExecutionError: When Solr cannot be queried or its response is unusable.
        """
        method = "POST" if use_post else "GET"
        try:
            with Timer(f"solr {method} '{spec.effective_query}'"):
                payload = self.client.search(spec.effective_query, spec.start, spec.rows,
                                             spec.to_solr_params(), method)
        except SolrClientError as e:
            raise ExecutionError(f"Error searching Solr index: {e}") from e

        response = _validate_payload(payload)
        self.hooks.notify_query_result(payload)

        docs = response["docs"]
        navigation_token = None
        if docs and spec.navigation_enabled and navigation is not None:
            navigation_token = navigation.register(spec, path=path)

        items = self.normalizer.normalize(docs, spec, navigation_token=navigation_token)

        if docs and alter_results:
            self.hooks.alter_object_results(items, spec)
            self.hooks.alter_results(items, spec)
            items = self.visibility_filter.apply_all(items)

        logger.info(f"Solr returned {len(items)} of {response['numFound']} results "
                    f"for '{spec.effective_query}' (start={spec.start}, rows={spec.rows})")

        return SearchResultSet(
            total_found=response["numFound"],
            items=tuple(items),
            spec=spec,
            facets=payload.get("facet_counts") or {},
            highlighting=payload.get("highlighting") or {},
            navigation_token=navigation_token,
        )
