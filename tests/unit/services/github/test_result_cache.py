from __future__ import annotations

from talentscout.services.github.cache import ResultCache, profile_cache_key, search_page_cache_key


def test_cache_keys_are_namespaced() -> None:
    assert search_page_cache_key(query="rust developer", page=2) == "users:rust developer:page:2"
    assert profile_cache_key("alice") == "profile:alice"


def test_cache_evicts_least_recently_used_entry() -> None:
    cache: ResultCache[int] = ResultCache(max_entries=2)
    cache.put("a", 1)
    cache.put("b", 2)
    assert cache.get("a") == 1

    cache.put("c", 3)

    assert "b" not in cache
    assert cache.get("a") == 1
    assert cache.get("c") == 3
    assert len(cache) == 2


def test_cache_overwrite_keeps_size_and_updates_value() -> None:
    cache: ResultCache[str] = ResultCache(max_entries=2)
    cache.put("a", "old")
    cache.put("a", "new")

    assert cache.get("a") == "new"
    assert len(cache) == 1


def test_cache_capacity_defaults_from_settings_and_is_at_least_one(override_settings) -> None:
    override_settings(result_cache_max_entries=5)
    assert ResultCache().max_entries == 5
    assert ResultCache(max_entries=0).max_entries == 1


def test_cache_clear_and_miss() -> None:
    cache: ResultCache[int] = ResultCache(max_entries=3)
    cache.put("a", 1)
    cache.clear()

    assert cache.get("a") is None
    assert len(cache) == 0
