"""
Unit tests for the Django cache adapter.
"""
from unittest.mock import patch

import pytest
from django.core.cache.backends.locmem import LocMemCache

from core.infrastructure.cache_adapters import DjangoCacheAdapter, compile_glob


def small_backend(name: str, max_entries: int) -> LocMemCache:
    backend = LocMemCache(
        name,
        {"TIMEOUT": 300, "OPTIONS": {"MAX_ENTRIES": max_entries, "CULL_FREQUENCY": 2}},
    )
    backend.clear()
    return backend


@pytest.mark.asyncio
class TestDjangoCacheAdapter:
    """Tests for DjangoCacheAdapter."""

    async def test_set_and_get(self, cache):
        """Test a stored value is returned."""
        await cache.set("license:abc", {"id": 1})
        assert await cache.get("license:abc") == {"id": 1}

    async def test_missing_key(self, cache):
        assert await cache.get("license:missing") is None

    async def test_entry_expires(self, cache):
        """Test entries disappear after their timeout."""
        with patch("time.time", return_value=1000.0):
            await cache.set("license:abc", "value", timeout=10)
        with patch("time.time", return_value=1011.0):
            assert await cache.get("license:abc") is None

    async def test_default_timeout_from_settings(self, cache):
        """Test set() without a timeout uses the backend TIMEOUT (300s)."""
        with patch("time.time", return_value=1000.0):
            await cache.set("license:abc", "value")
        with patch("time.time", return_value=1299.0):
            assert await cache.get("license:abc") == "value"
        with patch("time.time", return_value=1301.0):
            assert await cache.get("license:abc") is None

    async def test_backend_culls_when_full(self):
        """Test the MAX_ENTRIES ceiling drops the least recently used entry."""
        cache = DjangoCacheAdapter(backend=small_backend("cull-test", max_entries=2))
        await cache.set("a", 1)
        await cache.set("b", 2)
        assert await cache.get("a") == 1
        await cache.set("c", 3)

        assert await cache.get("b") is None
        assert await cache.get("a") == 1
        assert await cache.get("c") == 3

    async def test_index_pruned_past_max_keys(self):
        cache = DjangoCacheAdapter(backend=small_backend("prune-test", max_entries=2), max_keys=2)
        await cache.set("a", 1)
        await cache.set("b", 2)
        await cache.set("c", 3)

        assert len(cache) <= 2

    async def test_delete(self, cache):
        await cache.set("license:abc", 1)
        await cache.delete("license:abc")
        await cache.delete("license:never-set")
        assert await cache.get("license:abc") is None
        assert len(cache) == 0

    async def test_delete_by_pattern(self, cache):
        """Test glob deletion removes only matching keys."""
        await cache.set("search:milk:all", ["hit"])
        await cache.set("search::active", ["hit"])
        await cache.set("stats:dashboard", {"total": 1})

        removed = await cache.delete_by_pattern("search:*")

        assert removed == 2
        assert await cache.get("search:milk:all") is None
        assert await cache.get("stats:dashboard") == {"total": 1}

    async def test_pattern_delete_sees_keys_of_other_adapters(self, cache):
        """Test adapters on the same alias share one key index."""
        await DjangoCacheAdapter().set("license:abc", 1)

        assert await cache.delete_by_pattern("license:*") == 1
        assert await cache.get("license:abc") is None

    async def test_delete_by_pattern_without_match(self, cache):
        await cache.set("stats:dashboard", {"total": 1})
        assert await cache.delete_by_pattern("search:*") == 0

    async def test_pattern_scan_warning(self, cache, caplog):
        cache.scan_warning_threshold = 1
        await cache.set("a", 1)
        await cache.set("b", 2)
        await cache.delete_by_pattern("x*")
        assert "Pattern delete scanned 2 keys" in caplog.text

    async def test_flush(self, cache):
        await cache.set("a", 1)
        await cache.flush()
        assert await cache.get("a") is None
        assert len(cache) == 0

    async def test_backend_errors_are_logged_not_raised(self, caplog):
        cache = DjangoCacheAdapter(backend=small_backend("error-test", max_entries=10))
        with patch.object(LocMemCache, "get", side_effect=ConnectionError("down")):
            assert await cache.get("license:abc") is None
        assert "Error getting from cache" in caplog.text


class TestCompileGlob:
    """Tests for compile_glob."""

    def test_star_matches_any_run(self):
        assert compile_glob("license:*").match("license:id:42")

    def test_other_characters_are_literal(self):
        regex = compile_glob("search:a.b*")
        assert regex.match("search:a.b:all")
        assert not regex.match("search:axb:all")

    def test_anchored(self):
        assert not compile_glob("license:*").match("old:license:1")
