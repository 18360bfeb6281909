"""Named worker threads."""

from __future__ import annotations

import sys
import threading
from typing import Any, Callable, Optional

_OS_NAME_MAX = 15  # bytes the kernel keeps for a thread name


def set_thread_name_self(name: str) -> None:
    """Name the calling thread, for Python and, where possible, for the system."""
    threading.current_thread().name = name
    if sys.platform.startswith("linux"):
        encoded = name.encode("utf-8")[:_OS_NAME_MAX]
        try:
            with open(f"/proc/self/task/{threading.get_native_id()}/comm", "wb") as comm:
                comm.write(encoded)
        except OSError:
            pass


class _Worker(threading.Thread):
    """Thread that names itself, keeps the target's result and re-raises its error on join."""

    def __init__(self, target: Callable[..., Any], name: str, args: tuple) -> None:
        super().__init__(name=name)
        self._work = target
        self._work_args = args
        self.result: Any = None
        self._error: Optional[BaseException] = None

    def run(self) -> None:
        set_thread_name_self(self.name)
        try:
            self.result = self._work(*self._work_args)
        except BaseException as exc:  # handed to the joining thread
            self._error = exc

    def join(self, timeout: Optional[float] = None) -> Any:
        """Wait for the thread, then return its result or raise its exception."""
        super().join(timeout)
        if self.is_alive():
            return None
        if self._error is not None:
            error, self._error = self._error, None
            raise error
        return self.result


def start_thread(target: Callable[..., Any], name: str, *args: Any) -> threading.Thread:
    """Start ``target(*args)`` in a new thread called ``name`` and return the thread."""
    worker = _Worker(target, name, args)
    worker.start()
    return worker