from __future__ import annotations

import asyncio
import inspect
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional, TypeVar

from .host import TaskWork

T = TypeVar("T")

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float, str], Any]


@dataclass
class TaskSnapshot:
    task_id: str
    title: str
    status: str
    progress: float
    message: str
    error: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


@dataclass
class ModalTask:
    title: str
    task_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    status: str = "pending"
    progress: float = 0.0
    message: str = ""
    error: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancel_requested: bool = False
    on_progress: Optional[ProgressCallback] = None

    @property
    def is_cancelled(self) -> bool:
        return self.cancel_requested

    def cancel(self) -> None:
        self.cancel_requested = True

    def set_message(self, message: str) -> None:
        self.message = str(message)

    def set_progress(self, progress: float, message: str = "") -> None:
        self.progress = _normalize_progress(progress, floor=self.progress)
        if message:
            self.message = str(message)
        if self.on_progress is None:
            return
        try:
            result = self.on_progress(self.progress, self.message)
            if inspect.isawaitable(result):
                asyncio.ensure_future(result)
        except Exception:
            logger.warning("progress callback failed for task %s", self.task_id, exc_info=True)

    def snapshot(self) -> TaskSnapshot:
        return TaskSnapshot(
            task_id=self.task_id,
            title=self.title,
            status=self.status,
            progress=self.progress,
            message=self.message,
            error=self.error,
            started_at=self.started_at,
            completed_at=self.completed_at,
        )


class ModalTaskLauncher:
    """
    Runs one unit of work at a time with a progress monitor, the way a host
    shows a modal progress dialog.
    """

    def __init__(self, on_progress: Optional[ProgressCallback] = None) -> None:
        self._on_progress = on_progress
        self._current: Optional[ModalTask] = None
        self._history: list[TaskSnapshot] = []
        self._lock = asyncio.Lock()

    @property
    def current(self) -> Optional[ModalTask]:
        return self._current

    @property
    def history(self) -> list[TaskSnapshot]:
        return list(self._history)

    def cancel_current(self) -> bool:
        if self._current is None:
            return False
        self._current.cancel()
        return True

    async def launch_modal(self, title: str, work: TaskWork[T]) -> T:
        async with self._lock:
            task = ModalTask(title=title, on_progress=self._on_progress)
            self._current = task
            task.status = "running"
            task.started_at = datetime.now()
            logger.debug("Task %s started: %s", task.task_id, title)
            try:
                result = await work(task)
            except asyncio.CancelledError:
                task.status = "cancelled"
                raise
            except Exception as exc:
                task.status = "failed"
                task.error = str(exc)
                raise
            else:
                if task.cancel_requested:
                    task.status = "cancelled"
                else:
                    task.status = "completed"
                    task.progress = 1.0
                return result
            finally:
                task.completed_at = datetime.now()
                self._history.append(task.snapshot())
                self._current = None
                logger.debug("Task %s finished with status %s", task.task_id, task.status)


def _normalize_progress(raw: Any, floor: float = 0.0) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        value = 0.0
    if value > 1.0:
        value = value / 100.0
    value = max(0.0, min(1.0, value))
    return max(floor, value)


__all__ = ["ModalTask", "ModalTaskLauncher", "TaskSnapshot"]
