"""
Shared worker threads for blocking parsers, deck writers and file IO
"""

import asyncio
import functools
import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional, TypeVar

T = TypeVar('T')

logger = logging.getLogger(__name__)

THREAD_NAME_PREFIX = "doc2slides_worker"


def default_worker_count() -> int:
    return (os.cpu_count() or 4) * 5


class ThreadPoolManager:
    """
    One executor per process, created on first use

    After shutdown() the next call starts a fresh executor, so tests and
    short-lived CLI runs can shut the pool down without breaking later work.
    """

    _instance: Optional["ThreadPoolManager"] = None
    _instance_lock = threading.Lock()

    def __new__(cls, *args, **kwargs):
        with cls._instance_lock:
            if cls._instance is None:
                instance = super().__new__(cls)
                instance._executor = None
                instance._lock = threading.Lock()
                cls._instance = instance
            return cls._instance

    def __init__(self, max_workers: Optional[int] = None):
        if max_workers is not None or not hasattr(self, "max_workers"):
            self.max_workers = max_workers or default_worker_count()

    @property
    def executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.max_workers,
                    thread_name_prefix=THREAD_NAME_PREFIX,
                )
                logger.debug(f"Started worker pool with {self.max_workers} threads")
            return self._executor

    async def run_in_thread(self, func: Callable[..., T], *args, **kwargs) -> T:
        """
        Await a blocking call made on a worker thread

        Exceptions raised by func propagate unchanged.
        """
        try:
            return await asyncio.get_running_loop().run_in_executor(
                self.executor, functools.partial(func, *args, **kwargs)
            )
        except Exception as e:
            logger.debug(f"Worker call {getattr(func, '__name__', func)!r} failed: {e}")
            raise

    def shutdown(self, wait: bool = True):
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=wait)
            logger.debug("Worker pool shut down")


thread_pool = ThreadPoolManager()


async def run_blocking_io(func: Callable[..., T], *args, **kwargs) -> Any:
    """Run func(*args, **kwargs) on the shared pool"""
    return await thread_pool.run_in_thread(func, *args, **kwargs)
