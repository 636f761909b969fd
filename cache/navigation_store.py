import json
import secrets
from datetime import datetime
from typing import Optional

import redis

from config.logging_config import logger
from search.models import NavigationRecord, QuerySpec


class NavigationStore:
    """
    Redis-backed storage for search navigation records.

    Every executed search that enables navigation gets an opaque token. The
    QuerySpec is stored under that token, scoped to the user session, so a
    single object page can later work out where it sits in the result set.
    """

    # Key prefixes for organization
    RECORD_PREFIX = "search:nav:"
    SESSION_INDEX_PREFIX = "search:nav:index:"

    def __init__(self, redis_client: redis.Redis, ttl_seconds: int = 2 * 3600):
        """
        Args:
            redis_client: Client created with ``decode_responses=True``.
            ttl_seconds: Lifetime of a record, refreshed by new searches in the session.
        """
        self.redis_client = redis_client
        self.ttl_seconds = int(ttl_seconds)

    @classmethod
    def from_settings(cls, host: str = "localhost", port: int = 6379, db: int = 0,
                      password: Optional[str] = None, ttl_hours: int = 2) -> "NavigationStore":
        client = redis.Redis(host=host, port=port, db=db, password=password, decode_responses=True)
        logger.info(f"✅ Navigation store initialized at {host}:{port}")
        return cls(client, ttl_seconds=ttl_hours * 3600)

    def _record_key(self, session_id: str, token: str) -> str:
        return f"{self.RECORD_PREFIX}{session_id}:{token}"

    def _session_index_key(self, session_id: str) -> str:
        return f"{self.SESSION_INDEX_PREFIX}{session_id}"

    def session(self, session_id: str) -> "NavigationSession":
        if not session_id:
            raise ValueError("A session id is required for search navigation")
        return NavigationSession(self, session_id)

    def register(self, session_id: str, spec: QuerySpec, path: Optional[str] = None) -> str:
        token = secrets.token_hex(10)
        record = NavigationRecord(
            token=token,
            spec=spec,
            created_at=datetime.now().timestamp(),
            path=path,
        )
        index_key = self._session_index_key(session_id)
        self.redis_client.setex(self._record_key(session_id, token), self.ttl_seconds,
                                json.dumps(record.to_dict()))
        self.redis_client.sadd(index_key, token)
        self.redis_client.expire(index_key, self.ttl_seconds)
        logger.debug(f"Registered navigation token {token} for session {session_id}")
        return token

    def lookup(self, session_id: str, token: str) -> Optional[NavigationRecord]:
        key = self._record_key(session_id, token)
        cached = self.redis_client.get(key)
        if not cached:
            logger.info(f"🔍 Navigation MISS for token {token}")
            return None

        try:
            record = NavigationRecord.from_dict(json.loads(cached))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError):
            logger.warning(f"⚠️ Invalid navigation data for key: {key}")
            self.redis_client.delete(key)
            return None

        logger.info(f"✅ Navigation HIT for token {token}")
        return record

    def clear(self, session_id: str) -> int:
        """Drop every navigation record of a session. Returns the number deleted."""
        index_key = self._session_index_key(session_id)
        deleted_count = 0
        for token in self.redis_client.smembers(index_key):
            deleted_count += self.redis_client.delete(self._record_key(session_id, token))
        self.redis_client.delete(index_key)
        logger.info(f"🗑️ Cleared {deleted_count} navigation records for session {session_id}")
        return deleted_count

    def health_check(self) -> bool:
        try:
            self.redis_client.ping()
            return True
        except redis.ConnectionError:
            logger.error("❌ Redis connection failed")
            return False


class NavigationSession:
    """A NavigationStore bound to one session id."""

    def __init__(self, store: NavigationStore, session_id: str):
        self.store = store
        self.session_id = session_id

    def register(self, spec: QuerySpec, path: Optional[str] = None) -> str:
        return self.store.register(self.session_id, spec, path=path)

    def lookup(self, token: str) -> Optional[NavigationRecord]:
        return self.store.lookup(self.session_id, token)

    def clear(self) -> int:
        return self.store.clear(self.session_id)
