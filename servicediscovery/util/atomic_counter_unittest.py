import threading

from servicediscovery.util.atomic_counter import AtomicCounter


def test_initial_value() -> None:
    """Test the counter starts at the given value."""
    assert AtomicCounter().get() == 0
    assert AtomicCounter(5).get() == 5


def test_increment_returns_new_value() -> None:
    """Test increment by default and custom amounts."""
    counter = AtomicCounter()
    assert counter.increment() == 1
    assert counter.increment(3) == 4
    assert counter.get() == 4


def test_increment_thread_safety() -> None:
    """Test concurrent increments from multiple threads are not lost."""
    counter = AtomicCounter()
    num_threads = 8
    increments_per_thread = 1000

    def worker() -> None:
        for _ in range(increments_per_thread):
            counter.increment()

    threads = [threading.Thread(target=worker) for _ in range(num_threads)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert counter.get() == num_threads * increments_per_thread
