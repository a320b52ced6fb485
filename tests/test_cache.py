from app.core.cache import TTLCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_value_is_served_until_ttl_elapses():
    clock = FakeClock()
    cache = TTLCache(clock=clock)
    cache.set("categories", ["a"], ttl_seconds=300)

    clock.now += 299.9
    assert cache.get("categories") == ["a"]
    assert cache.has("categories")

    clock.now += 0.1
    assert cache.get("categories") is None
    assert not cache.has("categories")
    assert len(cache) == 0


def test_get_or_set_loads_once_per_ttl():
    clock = FakeClock()
    cache = TTLCache(clock=clock)
    calls = []

    def loader():
        calls.append(1)
        return {"tools": len(calls)}

    assert cache.get_or_set("dashboard-stats", loader, 60) == {"tools": 1}
    assert cache.get_or_set("dashboard-stats", loader, 60) == {"tools": 1}
    assert len(calls) == 1

    clock.now += 60
    assert cache.get_or_set("dashboard-stats", loader, 60) == {"tools": 2}
    assert len(calls) == 2


def test_set_overwrites_and_restarts_ttl():
    clock = FakeClock()
    cache = TTLCache(clock=clock)
    cache.set("k", 1, ttl_seconds=10)
    clock.now += 8
    cache.set("k", 2, ttl_seconds=10)
    clock.now += 8
    assert cache.get("k") == 2


def test_invalidate_and_invalidate_all():
    cache = TTLCache()
    cache.set("a", 1)
    cache.set("b", 2)

    cache.invalidate("a")
    cache.invalidate("missing")
    assert cache.get("a") is None
    assert cache.get("b") == 2

    cache.invalidate_all()
    assert len(cache) == 0
    assert cache.get("b") is None
