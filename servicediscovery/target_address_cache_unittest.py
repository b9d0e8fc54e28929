import threading

from servicediscovery.target_address_cache import TargetAddressCache


def test_get_miss_returns_none() -> None:
    cache = TargetAddressCache()
    assert cache.get("host1.node.consul") is None
    assert "host1.node.consul" not in cache
    assert len(cache) == 0


def test_store_then_get() -> None:
    cache = TargetAddressCache()
    assert cache.store("host1.node.consul", "10.0.0.1") == "10.0.0.1"
    assert cache.get("host1.node.consul") == "10.0.0.1"
    assert "host1.node.consul" in cache
    assert len(cache) == 1


def test_first_store_wins() -> None:
    cache = TargetAddressCache()
    cache.store("host1.node.consul", "10.0.0.1")

    assert cache.store("host1.node.consul", "10.0.0.2") == "10.0.0.1"
    assert cache.get("host1.node.consul") == "10.0.0.1"
    assert len(cache) == 1


def test_concurrent_stores_keep_single_value() -> None:
    cache = TargetAddressCache()
    results: list[str] = []
    results_lock = threading.Lock()

    def worker(i: int) -> None:
        stored = cache.store("host1.node.consul", f"10.0.0.{i}")
        with results_lock:
            results.append(stored)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(1, 21)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(set(results)) == 1
    assert cache.get("host1.node.consul") == results[0]
