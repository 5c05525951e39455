"""
Tests for the in-memory store registry.
"""

from offline_cache.entities import CachedResponse, RequestKey
from offline_cache.protocols import ResponseStore, StoreRegistry
from offline_cache.repositories import InMemoryStoreRegistry

KEY = RequestKey.for_url("http://app.test/app.js")


def test_satisfies_protocols(registry):
    assert isinstance(registry, StoreRegistry)


async def test_open_is_idempotent(registry):
    first = await registry.open("zenflow-v2-static")
    second = await registry.open("zenflow-v2-static")
    assert first is second
    assert isinstance(first, ResponseStore)
    assert await registry.keys() == ["zenflow-v2-static"]


async def test_put_then_match_returns_equivalent_response(registry):
    store = await registry.open("zenflow-v2-static")
    response = CachedResponse.build(200, "console.log(1)", {"Content-Type": "text/javascript"})
    await store.put(KEY, response)

    stored = await store.match(KEY)
    assert stored.status == 200
    assert stored.headers == response.headers
    assert stored.body == b"console.log(1)"


async def test_later_put_overwrites(registry):
    store = await registry.open("s")
    await store.put(KEY, CachedResponse.build(200, "old"))
    await store.put(KEY, CachedResponse.build(200, "new"))
    assert (await store.match(KEY)).body == b"new"
    assert await store.keys() == [KEY]


async def test_delete_entry(registry):
    store = await registry.open("s")
    await store.put(KEY, CachedResponse.build(200))
    assert await store.delete(KEY) is True
    assert await store.delete(KEY) is False
    assert await store.match(KEY) is None


async def test_registry_match_named_store_only(registry):
    static = await registry.open("a")
    await registry.open("b")
    await static.put(KEY, CachedResponse.build(200, "a"))

    assert await registry.match(KEY, "b") is None
    assert await registry.match(KEY, "missing") is None
    assert (await registry.match(KEY, "a")).body == b"a"


async def test_registry_match_searches_all_in_creation_order(registry):
    first = await registry.open("first")
    second = await registry.open("second")
    await second.put(KEY, CachedResponse.build(200, "second"))
    await first.put(KEY, CachedResponse.build(200, "first"))

    assert (await registry.match(KEY)).body == b"first"


async def test_delete_store_removes_entries():
    registry = InMemoryStoreRegistry()
    store = await registry.open("gone")
    await store.put(KEY, CachedResponse.build(200))

    assert await registry.delete("gone") is True
    assert await registry.delete("gone") is False
    assert not await registry.has("gone")
    assert await registry.match(KEY) is None


async def test_health_check(registry):
    assert await registry.health_check() is True
