from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator, List

from sqlalchemy import asc, delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..db import session_scope
from ..errors import NotFoundError, StorageError
from ..models import Task

log = logging.getLogger(__name__)


class TaskStore:
    """SQLAlchemy-backed persistence for the ``scheduler`` table.

    Every call runs in its own transaction and returns detached ``Task``
    instances. Driver failures surface as ``StorageError``.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self.session_factory = session_factory

    @contextmanager
    def _session(self, action: str) -> Generator[Session, None, None]:
        try:
            with session_scope(self.session_factory) as session:
                yield session
        except SQLAlchemyError as exc:
            raise StorageError(f"failed to {action}: {exc}") from exc

    def create(self, date: str, title: str, comment: str, repeat: str) -> int:
        with self._session("add task") as session:
            task = Task(date=date, title=title, comment=comment, repeat=repeat)
            session.add(task)
            session.flush()
            return task.id

    def get_by_id(self, task_id: int) -> Task:
        with self._session("fetch task") as session:
            task = session.get(Task, task_id)
        if task is None:
            raise NotFoundError(f"task {task_id} not found")
        return task

    def exists(self, task_id: int) -> bool:
        with self._session("fetch task") as session:
            return session.scalar(select(Task.id).where(Task.id == task_id)) is not None

    def list(self) -> List[Task]:
        stmt = select(Task).order_by(asc(Task.date), asc(Task.id))
        with self._session("fetch tasks") as session:
            return list(session.scalars(stmt).all())

    def update(self, task: Task) -> None:
        stmt = (
            update(Task)
            .where(Task.id == task.id)
            .values(date=task.date, title=task.title, comment=task.comment, repeat=task.repeat)
        )
        with self._session("update task") as session:
            result = session.execute(stmt)
        if result.rowcount == 0:
            raise NotFoundError(f"task {task.id} not found")

    def advance_date(self, task_id: int, expected: str, new: str) -> bool:
        """Set the date only if it still equals ``expected``; False when another writer got there first."""
        stmt = update(Task).where(Task.id == task_id, Task.date == expected).values(date=new)
        with self._session("update task date") as session:
            result = session.execute(stmt)
        return result.rowcount == 1

    def delete(self, task_id: int) -> int:
        with self._session("delete task") as session:
            result = session.execute(delete(Task).where(Task.id == task_id))
        log.debug("delete task %s affected %s row(s)", task_id, result.rowcount)
        return result.rowcount
