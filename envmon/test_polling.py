import threading

from envmon.polling import RequestTracker, TickCounter


def test_latest_ticket_is_current():
    tracker = RequestTracker()
    first = tracker.begin("d1")
    assert tracker.is_current(first)

    second = tracker.begin("d1")
    assert not tracker.is_current(first)
    assert tracker.is_current(second)


def test_new_key_supersedes_old():
    tracker = RequestTracker()
    old = tracker.begin("d1")
    tracker.begin("d2")
    assert not tracker.is_current(old)


def test_generations_are_unique_across_threads():
    tracker = RequestTracker()
    tickets = []
    lock = threading.Lock()

    def worker():
        for _ in range(100):
            t = tracker.begin("k")
            with lock:
                tickets.append(t.generation)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5.0)

    assert sorted(tickets) == list(range(1, 401))


def test_tick_counter():
    ticks = TickCounter()
    # first sighting only sets the baseline
    assert ticks.consume(0) is False
    # plain rerun
    assert ticks.consume(0) is False
    assert ticks.consume(1) is True
    assert ticks.consume(1) is False
    assert ticks.consume(3) is True
    # timer remounted
    assert ticks.consume(0) is False
    assert ticks.consume(1) is True


def test_tick_counter_reset():
    ticks = TickCounter()
    ticks.consume(5)
    ticks.reset()
    assert ticks.consume(6) is False
    assert ticks.consume(7) is True
