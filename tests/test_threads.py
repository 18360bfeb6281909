import threading

import pytest

from icekit.threads import set_thread_name_self, start_thread


def test_start_thread_returns_result_on_join():
    thread = start_thread(lambda a, b: a + b, "adder", 2, 3)
    assert thread.join() == 5
    assert thread.result == 5


def test_thread_runs_under_given_name():
    seen = []
    thread = start_thread(lambda: seen.append(threading.current_thread().name), "juice-poll")
    thread.join()
    assert seen == ["juice-poll"]
    assert thread.name == "juice-poll"


def test_exception_is_raised_on_join():
    def fail():
        raise RuntimeError("boom")

    thread = start_thread(fail, "failing")
    with pytest.raises(RuntimeError, match="boom"):
        thread.join()


def test_set_thread_name_self_renames_current_thread():
    def rename():
        set_thread_name_self("renamed-worker")
        return threading.current_thread().name

    worker = start_thread(rename, "original")
    assert worker.join(timeout=5) == "renamed-worker"
    assert worker.name == "renamed-worker"


def test_threads_run_concurrently_and_finish():
    barrier = threading.Barrier(2, timeout=5)
    first = start_thread(barrier.wait, "first")
    second = start_thread(barrier.wait, "second")
    results = {first.join(timeout=5), second.join(timeout=5)}
    assert results == {0, 1}
    assert not first.is_alive() and not second.is_alive()