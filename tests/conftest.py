import pytest


class InMemoryRedis:
    """Just enough of the redis client API for the navigation store."""

    def __init__(self):
        self.data = {}
        self.sets = {}
        self.ttls = {}

    def setex(self, key, ttl, value):
        self.data[key] = value
        self.ttls[key] = ttl

    def get(self, key):
        return self.data.get(key)

    def sadd(self, key, *values):
        self.sets.setdefault(key, set()).update(values)

    def smembers(self, key):
        return set(self.sets.get(key, set()))

    def expire(self, key, ttl):
        self.ttls[key] = ttl

    def delete(self, *keys):
        deleted = 0
        for key in keys:
            if key in self.data:
                del self.data[key]
                deleted += 1
            if key in self.sets:
                del self.sets[key]
                deleted += 1
        return deleted

    def ping(self):
        return True


@pytest.fixture
def redis_client():
    """An in-memory stand-in for a decode_responses=True redis client."""
    return InMemoryRedis()
