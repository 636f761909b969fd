"""
Search pipeline: query construction, execution and navigation lookups.
"""
import copy
from typing import Any, Callable, Mapping, Optional

from cache.navigation_store import NavigationStore
from config.logging_config import logger
from config.search_config import SearchSettings
from search.field_visibility import FieldVisibilityFilter, VisibilityPolicy
from search.hooks import HookRegistry
from search.models import NavigationContext, SearchResultSet
from search.query_builder import build_query
from search.query_executor import QueryExecutor
from search.result_normalizer import ResultNormalizer
from search.solr_client import SolrClient
from utils.timing import timed


class SearchPipeline:
    """
    Ties the query builder, the executor and the navigation store together.

    One instance serves many requests; it keeps no per-request state.
    """

    def __init__(self, settings: SearchSettings, client: SolrClient,
                 navigation_store: Optional[NavigationStore] = None,
                 hooks: Optional[HookRegistry] = None,
                 visibility_policy: Optional[VisibilityPolicy] = None,
                 handler_has_query_fields: Optional[Callable[[], bool]] = None):
        self.settings = settings
        self.client = client
        self.navigation_store = navigation_store
        self.hooks = hooks or HookRegistry()
        self.handler_has_query_fields = handler_has_query_fields
        self.executor = QueryExecutor(
            client=client,
            normalizer=ResultNormalizer(settings),
            visibility_filter=FieldVisibilityFilter(
                settings.result_fields,
                is_visible=visibility_policy,
                limit_fields=settings.limit_result_fields,
            ),
            hooks=self.hooks,
        )

    @timed("search_pipeline")
    def search(self, raw_query: Optional[str], url_params: Optional[Mapping[str, Any]] = None,
               session_id: Optional[str] = None, use_post: bool = False,
               path: Optional[str] = None) -> SearchResultSet:
        """
        Build and execute a search.

        Raises:
            ExecutionError: When the Solr call fails.
        """
        spec = build_query(raw_query, url_params, self.settings, hooks=self.hooks,
                           handler_has_query_fields=self.handler_has_query_fields)

        navigation = None
        if spec.navigation_enabled and session_id and self.navigation_store is not None:
            navigation = self.navigation_store.session(session_id)

        return self.executor.execute(spec, use_post=use_post, navigation=navigation, path=path)

    def navigate(self, session_id: str, token: str, offset: int) -> Optional[NavigationContext]:
        """
        Find the neighbours of the item at ``offset`` on the page a navigation
        token was issued for.

        Returns None when the token is unknown to the session.
        """
        if self.navigation_store is None:
            return None
        record = self.navigation_store.lookup(session_id, token)
        if record is None:
            return None

        offset = max(0, int(offset))
        position = record.spec.start + offset

        spec = copy.deepcopy(record.spec)
        spec.navigation_enabled = False
        spec.start = max(0, position - 1)
        spec.rows = 3 if position > 0 else 2

        result = self.executor.execute(spec, alter_results=False)
        ids = [item.id for item in result.items]
        if position > 0:
            previous_id = ids[0] if ids else None
            neighbours = ids[1:]
        else:
            previous_id = None
            neighbours = ids

        context = NavigationContext(
            token=token,
            offset=offset,
            position=position + 1,
            total_found=result.total_found,
            current_id=neighbours[0] if len(neighbours) > 0 else None,
            previous_id=previous_id,
            next_id=neighbours[1] if len(neighbours) > 1 else None,
        )
        logger.debug(f"Navigation for {token}@{offset}: {context}")
        return context
