"""
Extension points around query construction and result shaping.

Callbacks run synchronously in registration order. Exceptions raised by a
callback are not caught.
"""
from collections import defaultdict
from typing import Callable, Dict, List, Any

from search.models import QuerySpec, ResultItem

QueryAlterHook = Callable[[QuerySpec], None]
QueryResultHook = Callable[[Dict[str, Any]], None]
ObjectResultHook = Callable[[ResultItem, QuerySpec], None]
ResultsAlterHook = Callable[[List[ResultItem], QuerySpec], None]

CONTENT_MODEL_PREFIX = "info:fedora/"


def content_model_key(content_model_uri: str) -> str:
    if content_model_uri.startswith(CONTENT_MODEL_PREFIX):
        return content_model_uri[len(CONTENT_MODEL_PREFIX):]
    return content_model_uri


class HookRegistry:

    def __init__(self):
        self.query_alter: List[QueryAlterHook] = []
        self.query_result: List[QueryResultHook] = []
        self.object_result: Dict[str, List[ObjectResultHook]] = defaultdict(list)
        self.results_alter: List[ResultsAlterHook] = []

    # --- registration (each returns the callback so it works as a decorator) ---

    def on_query_alter(self, hook: QueryAlterHook) -> QueryAlterHook:
        self.query_alter.append(hook)
        return hook

    def on_query_result(self, hook: QueryResultHook) -> QueryResultHook:
        self.query_result.append(hook)
        return hook

    def on_object_result(self, content_model: str):
        def register(hook: ObjectResultHook) -> ObjectResultHook:
            self.object_result[content_model_key(content_model)].append(hook)
            return hook
        return register

    def on_results_alter(self, hook: ResultsAlterHook) -> ResultsAlterHook:
        self.results_alter.append(hook)
        return hook

    # --- invocation ---

    def alter_query(self, spec: QuerySpec) -> None:
        for hook in self.query_alter:
            hook(spec)

    def notify_query_result(self, raw_payload: Dict[str, Any]) -> None:
        for hook in self.query_result:
            hook(raw_payload)

    def alter_object_results(self, items: List[ResultItem], spec: QuerySpec) -> None:
        """Run the per content model hooks for every item that declares content models."""
        if not self.object_result:
            return
        for item in items:
            for content_model_uri in item.content_models:
                for hook in self.object_result.get(content_model_key(content_model_uri), []):
                    hook(item, spec)

    def alter_results(self, items: List[ResultItem], spec: QuerySpec) -> None:
        for hook in self.results_alter:
            hook(items, spec)
