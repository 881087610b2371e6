"""
Background task manager for work that outlives the call that started it,
such as document enhancement
"""

import asyncio
import logging
import traceback
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable, Dict, Optional

from ..utils.thread_pool import run_blocking_io
from .store import KeyValueStore, MemoryStore

logger = logging.getLogger(__name__)


class TaskStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


FINISHED_STATUSES = (TaskStatus.COMPLETED, TaskStatus.FAILED, TaskStatus.CANCELLED)


@dataclass
class BackgroundTask:
    """Outcome record of one submitted job"""
    task_id: str
    task_type: str
    status: TaskStatus = TaskStatus.PENDING
    result: Optional[Any] = None
    error: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def finished(self) -> bool:
        return self.status in FINISHED_STATUSES

    def mark(self, status: TaskStatus, result: Any = None, error: Optional[str] = None):
        self.status = status
        self.updated_at = datetime.now()
        if result is not None:
            self.result = result
        if error is not None:
            self.error = error


class BackgroundTaskManager:
    """
    Runs jobs as asyncio tasks on the current loop and keeps their records

    A job is a coroutine function or a blocking callable; blocking callables
    go to the shared thread pool. Submitting under an identifier whose job is
    still running cancels the old job first.
    """

    def __init__(self, records: Optional[KeyValueStore[BackgroundTask]] = None):
        self.records: KeyValueStore[BackgroundTask] = records if records is not None else MemoryStore()
        self.running_tasks: Dict[str, asyncio.Task] = {}

    def create_task(self, task_type: str, metadata: Optional[Dict[str, Any]] = None, task_id: Optional[str] = None) -> str:
        """
        Register a pending job without starting it

        Args:
            task_type: free-form category, e.g. "enhance"
            metadata: extra details kept with the record
            task_id: explicit identifier, a random one otherwise

        Returns:
            the task identifier
        """
        task_id = task_id or uuid.uuid4().hex
        self.records.set(task_id, BackgroundTask(task_id=task_id, task_type=task_type, metadata=dict(metadata or {})))
        logger.debug(f"Registered {task_type} task {task_id}")
        return task_id

    def get_task(self, task_id: str) -> Optional[BackgroundTask]:
        return self.records.get(task_id)

    def _settle(self, record: BackgroundTask, status: TaskStatus, result: Any = None, error: Optional[str] = None):
        record.mark(status, result=result, error=error)
        if self.records.get(record.task_id) is record:
            self.records.set(record.task_id, record)
        else:
            logger.debug(f"Task {record.task_id} was replaced, dropping its {status.value} outcome")

    async def execute_task(self, task_id: str, func: Callable, *args, **kwargs):
        """Run one job to completion and record how it ended"""
        record = self.records.get(task_id)
        if record is None:
            record = self.records.get(self.create_task("adhoc", task_id=task_id))
        self._settle(record, TaskStatus.RUNNING)
        try:
            if asyncio.iscoroutinefunction(func):
                result = await func(*args, **kwargs)
            else:
                result = await run_blocking_io(func, *args, **kwargs)
        except asyncio.CancelledError:
            self._settle(record, TaskStatus.CANCELLED, error="Task cancelled")
            logger.info(f"Task {task_id} cancelled")
            raise
        except Exception as e:
            self._settle(record, TaskStatus.FAILED, error=f"{e}\n{traceback.format_exc()}")
            logger.error(f"Task {task_id} failed: {e}", exc_info=True)
        else:
            self._settle(record, TaskStatus.COMPLETED, result=result)
            logger.info(f"Task {task_id} completed")

    def submit_task(
        self,
        task_type: str,
        func: Callable,
        *args,
        metadata: Optional[Dict[str, Any]] = None,
        task_id: Optional[str] = None,
        **kwargs
    ) -> str:
        """
        Start a job; must be called with an event loop running

        Returns:
            the task identifier
        """
        if task_id is not None and self.cancel_task(task_id):
            logger.info(f"Replacing running task {task_id}")

        task_id = self.create_task(task_type, metadata, task_id=task_id)
        running = asyncio.create_task(self.execute_task(task_id, func, *args, **kwargs))
        self.running_tasks[task_id] = running
        running.add_done_callback(lambda done: self._forget(task_id, done))
        logger.info(f"Submitted {task_type} task {task_id}")
        return task_id

    def _forget(self, task_id: str, done: asyncio.Task):
        if self.running_tasks.get(task_id) is done:
            del self.running_tasks[task_id]

    async def wait(self, task_id: str, timeout: Optional[float] = None) -> Optional[BackgroundTask]:
        """
        Wait until a job has finished

        Raises:
            asyncio.TimeoutError: the job is still running after timeout seconds
        """
        running = self.running_tasks.get(task_id)
        if running is not None:
            done, _ = await asyncio.wait({running}, timeout=timeout)
            if not done:
                raise asyncio.TimeoutError(f"Task {task_id} still running after {timeout}s")
        return self.records.get(task_id)

    def cancel_task(self, task_id: str) -> bool:
        running = self.running_tasks.get(task_id)
        if running is None or running.done():
            return False
        running.cancel()
        logger.info(f"Cancelling task {task_id}")
        return True

    def cleanup_old_tasks(self, max_age_hours: int = 24) -> int:
        """Drop finished records not updated for max_age_hours; returns how many went"""
        cutoff = datetime.now() - timedelta(hours=max_age_hours)
        removed = 0
        for task_id in self.records.keys():
            record = self.records.get(task_id)
            if record is not None and record.finished and record.updated_at < cutoff:
                self.records.delete(task_id)
                removed += 1
        if removed:
            logger.info(f"Removed {removed} finished task records")
        return removed

    def get_task_stats(self) -> Dict[str, int]:
        stats = {status.value: 0 for status in TaskStatus}
        for record in self.records.values():
            stats[record.status.value] += 1
        stats["total"] = sum(stats.values())
        return stats


_task_manager: Optional[BackgroundTaskManager] = None


def get_task_manager() -> BackgroundTaskManager:
    """Process-wide task manager"""
    global _task_manager
    if _task_manager is None:
        _task_manager = BackgroundTaskManager()
    return _task_manager
