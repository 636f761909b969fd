import json

import pytest
import redis
from unittest.mock import Mock

from cache.navigation_store import NavigationStore
from search.models import QuerySpec, SortOrder, DefType


@pytest.fixture
def store(redis_client):
    return NavigationStore(redis_client, ttl_seconds=600)


@pytest.fixture
def spec():
    return QuerySpec(
        raw_query="cat",
        effective_query="cat",
        rows=10,
        page=2,
        start=20,
        def_type=DefType.DISMAX,
        sort=[("title", SortOrder.DESC)],
        filters=["-state:deleted"],
        params={"facet": "true", "facet.field": ["subject_ms"]},
        internal_params={"type": "dismax"},
        navigation_enabled=True,
    )


class TestNavigationStore:

    def test_register_and_lookup(self, store, spec):
        token = store.register("session-1", spec, path="http://example.org/search")
        record = store.lookup("session-1", token)
        assert record is not None
        assert record.token == token
        assert record.spec == spec
        assert record.path == "http://example.org/search"
        assert record.created_at > 0

    def test_tokens_are_unique_for_identical_specs(self, store, spec):
        tokens = {store.register("session-1", spec) for _ in range(50)}
        assert len(tokens) == 50

    def test_token_is_hex(self, store, spec):
        token = store.register("session-1", spec)
        assert len(token) == 20
        int(token, 16)

    def test_lookup_unknown_token(self, store):
        assert store.lookup("session-1", "missing") is None

    def test_lookup_is_session_scoped(self, store, spec):
        token = store.register("session-1", spec)
        assert store.lookup("session-2", token) is None

    def test_records_expire_with_ttl(self, store, redis_client, spec):
        token = store.register("session-1", spec)
        assert redis_client.ttls[f"search:nav:session-1:{token}"] == 600
        assert redis_client.ttls["search:nav:index:session-1"] == 600

    def test_corrupt_record_is_dropped(self, store, redis_client):
        redis_client.data["search:nav:session-1:bad"] = "{not json"
        assert store.lookup("session-1", "bad") is None
        assert "search:nav:session-1:bad" not in redis_client.data

    def test_record_is_json(self, store, redis_client, spec):
        token = store.register("session-1", spec)
        payload = json.loads(redis_client.data[f"search:nav:session-1:{token}"])
        assert payload["spec"]["sort"] == [["title", "desc"]]
        assert payload["spec"]["def_type"] == "dismax"

    def test_clear_session(self, store, spec):
        tokens = [store.register("session-1", spec) for _ in range(3)]
        other = store.register("session-2", spec)
        assert store.clear("session-1") == 3
        assert all(store.lookup("session-1", t) is None for t in tokens)
        assert store.lookup("session-2", other) is not None

    def test_bound_session(self, store, spec):
        session = store.session("session-1")
        token = session.register(spec)
        assert session.lookup(token).spec == spec
        assert session.clear() == 1

    def test_session_requires_id(self, store):
        with pytest.raises(ValueError):
            store.session("")

    def test_health_check_failure(self):
        client = Mock()
        client.ping.side_effect = redis.ConnectionError("down")
        assert NavigationStore(client).health_check() is False
