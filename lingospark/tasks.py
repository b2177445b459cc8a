"""
Background work for the UI.

Remote calls run on daemon threads; their results are handed back on the Tk
main loop via ``after(0, ...)`` so that all state changes happen on one
thread. ``InlineDispatcher`` offers the same interface without threads.
"""

import threading
import time
from typing import Any, Callable, Optional

from .logger import logger

DoneCallback = Callable[[Any], None]
ErrorCallback = Callable[[BaseException], None]


class ThreadDispatcher:
    """Runs work on daemon threads and delivers results through ``root.after``."""

    def __init__(self, root) -> None:
        self.root = root

    def submit(
        self,
        task_name: str,
        work: Callable[[], Any],
        on_done: DoneCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> threading.Thread:
        logger.task_start(task_name)

        def _run() -> None:
            start_time = time.perf_counter()
            try:
                result = work()
            except Exception as e:
                logger.task_error(task_name, str(e))
                if on_error is not None:
                    self.root.after(0, lambda err=e: on_error(err))
                return
            logger.task_complete(task_name, duration_ms=(time.perf_counter() - start_time) * 1000)
            self.root.after(0, lambda res=result: on_done(res))

        thread = threading.Thread(target=_run, name=task_name, daemon=True)
        thread.start()
        return thread

    def later(self, delay_ms: int, callback: Callable[[], None]) -> None:
        self.root.after(delay_ms, callback)


class InlineDispatcher:
    """Runs work synchronously on the calling thread; delays are skipped."""

    def submit(
        self,
        task_name: str,
        work: Callable[[], Any],
        on_done: DoneCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        logger.task_start(task_name)
        try:
            result = work()
        except Exception as e:
            logger.task_error(task_name, str(e))
            if on_error is not None:
                on_error(e)
            return
        logger.task_complete(task_name)
        on_done(result)

    def later(self, delay_ms: int, callback: Callable[[], None]) -> None:
        callback()
