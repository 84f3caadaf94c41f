import threading
import time

import pytest

from rate_limiter import RateLimiter


def test_first_request_is_not_delayed(fake_clock) -> None:
    limiter = RateLimiter(3.0, clock=fake_clock, sleep=fake_clock.sleep)

    with limiter.slot():
        pass

    assert fake_clock.sleeps == []
    assert limiter.last_request_at == fake_clock.now


def test_close_requests_wait_for_the_remaining_delay(fake_clock) -> None:
    limiter = RateLimiter(3.0, clock=fake_clock, sleep=fake_clock.sleep)

    with limiter.slot():
        fake_clock.advance(0.5)  # request duration
    fake_clock.advance(1.0)
    with limiter.slot():
        pass

    assert fake_clock.sleeps == [pytest.approx(2.0)]


def test_spaced_out_requests_are_not_delayed(fake_clock) -> None:
    limiter = RateLimiter(3.0, clock=fake_clock, sleep=fake_clock.sleep)

    with limiter.slot():
        pass
    fake_clock.advance(5.0)
    with limiter.slot():
        pass

    assert fake_clock.sleeps == []


def test_failed_request_still_records_timestamp(fake_clock) -> None:
    limiter = RateLimiter(3.0, clock=fake_clock, sleep=fake_clock.sleep)

    with pytest.raises(RuntimeError):
        with limiter.slot():
            fake_clock.advance(0.25)
            raise RuntimeError("boom")

    assert limiter.last_request_at == fake_clock.now
    with limiter.slot():
        pass
    assert fake_clock.sleeps == [pytest.approx(3.0)]


def test_zero_delay_never_sleeps(fake_clock) -> None:
    limiter = RateLimiter(0, clock=fake_clock, sleep=fake_clock.sleep)

    for _ in range(3):
        with limiter.slot():
            pass

    assert fake_clock.sleeps == []


def test_consecutive_requests_are_measurably_spaced() -> None:
    limiter = RateLimiter(0.05)

    with limiter.slot():
        pass
    finished = limiter.last_request_at
    with limiter.slot():
        started = time.monotonic()

    assert started - finished >= 0.05


def test_concurrent_callers_never_overlap() -> None:
    limiter = RateLimiter(0.01)
    intervals: list[tuple[float, float]] = []
    lock = threading.Lock()

    def worker() -> None:
        with limiter.slot():
            begin = time.monotonic()
            time.sleep(0.005)
            end = time.monotonic()
        with lock:
            intervals.append((begin, end))

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    intervals.sort()
    for (_, prev_end), (next_begin, _) in zip(intervals, intervals[1:]):
        assert next_begin >= prev_end


def test_negative_delay_is_rejected() -> None:
    with pytest.raises(ValueError):
        RateLimiter(-1.0)
