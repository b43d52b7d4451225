# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for the annotation cache."""

import concurrent.futures
import threading
import time

from docnotes.cache import AnnotationCache


def test_ph2_cch_001_computes_once_per_identity() -> None:
    cache = AnnotationCache()
    calls: list[int] = []

    def compute() -> dict[str, str]:
        calls.append(1)
        return {"a": "1"}

    first = cache.get_or_compute("pkg.Foo", compute)
    second = cache.get_or_compute("pkg.Foo", compute)

    assert first is second
    assert dict(first) == {"a": "1"}
    assert len(calls) == 1
    assert "pkg.Foo" in cache
    assert len(cache) == 1


def test_ph2_cch_002_empty_map_is_cached() -> None:
    cache = AnnotationCache()
    calls: list[int] = []

    def compute() -> dict[str, str]:
        calls.append(1)
        return {}

    cache.get_or_compute("pkg.Foo#bar", compute)
    cache.get_or_compute("pkg.Foo#bar", compute)

    assert len(calls) == 1
    assert dict(cache.get("pkg.Foo#bar") or {}) == {}


def test_ph2_cch_003_cached_entry_is_detached_from_computed_dict() -> None:
    cache = AnnotationCache()
    source = {"a": "1"}

    entry = cache.get_or_compute("pkg.Foo", lambda: source)
    source["a"] = "changed"

    assert entry["a"] == "1"


def test_ph2_cch_004_concurrent_first_access_computes_once() -> None:
    cache = AnnotationCache()
    calls: list[int] = []
    lock = threading.Lock()

    def compute() -> dict[str, str]:
        with lock:
            calls.append(1)
        time.sleep(0.01)
        return {"a": "1"}

    with concurrent.futures.ThreadPoolExecutor(max_workers=8) as executor:
        results = list(
            executor.map(
                lambda _: cache.get_or_compute("pkg.Foo", compute), range(16)
            )
        )

    assert len(calls) == 1
    assert all(result is results[0] for result in results)


def test_ph2_cch_005_clear_drops_entries() -> None:
    cache = AnnotationCache()
    cache.get_or_compute("pkg.Foo", lambda: {"a": "1"})

    cache.clear()

    assert len(cache) == 0
    assert cache.get("pkg.Foo") is None
