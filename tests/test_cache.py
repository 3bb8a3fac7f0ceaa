import pytest
from conftest import FailingCache

from starfield.cache import JsonFileCache, MemoryCache, load_count, save_count
from starfield.errors import PersistenceUnavailable


def test_json_cache_round_trip(tmp_path):
    cache = JsonFileCache(tmp_path / "nested" / "cache.json")
    assert cache.load("stars") is None
    cache.save("stars", 640)
    cache.save("other", 5)
    assert JsonFileCache(tmp_path / "nested" / "cache.json").load("stars") == 640


def test_json_cache_reports_corrupt_file(tmp_path):
    path = tmp_path / "cache.json"
    path.write_text("{not json")
    with pytest.raises(PersistenceUnavailable):
        JsonFileCache(path).load("stars")
    # Saving replaces the broken document
    JsonFileCache(path).save("stars", 300)
    assert JsonFileCache(path).load("stars") == 300


def test_helpers_swallow_failures():
    assert load_count(FailingCache(), "stars") is None
    assert save_count(FailingCache(), "stars", 10) is False
    assert load_count(None, "stars") is None
    assert save_count(None, "stars", 10) is False


def test_helpers_ignore_garbage_values():
    cache = MemoryCache()
    cache.values["stars"] = "lots"
    assert load_count(cache, "stars") is None
    assert save_count(cache, "stars", 123.0) is True
    assert load_count(cache, "stars") == 123


def test_unwritable_cache_is_not_fatal(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("")
    cache = JsonFileCache(blocker / "cache.json")
    assert save_count(cache, "stars", 10) is False
