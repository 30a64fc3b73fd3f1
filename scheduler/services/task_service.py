from __future__ import annotations

import logging
import re
from datetime import date
from typing import Callable, List, Optional, Union

from ..errors import NotFoundError, StorageError, ValidationError
from ..models import Task
from ..recurrence import NoRule, RecurrenceRule, format_day, next_occurrence, parse_day, parse_rule
from ..schemas import TaskCreate, TaskUpdate
from .task_store import TaskStore

log = logging.getLogger(__name__)

MAX_ADVANCE_ATTEMPTS = 5
# SQLite INTEGER range
MAX_TASK_ID = 2**63 - 1

_TASK_ID_RE = re.compile(r"[0-9]+")


def parse_task_id(raw: Union[int, str, None]) -> int:
    if raw is None:
        raise ValidationError("task ID is required")
    if isinstance(raw, bool) or not isinstance(raw, (int, str)):
        raise ValidationError("invalid task ID")
    if isinstance(raw, int):
        task_id = raw
    else:
        text = raw.strip()
        if not text:
            raise ValidationError("task ID is required")
        if not _TASK_ID_RE.fullmatch(text):
            raise ValidationError("invalid task ID")
        task_id = int(text)
    if task_id <= 0:
        raise ValidationError("task ID is required")
    if task_id > MAX_TASK_ID:
        raise ValidationError("invalid task ID")
    return task_id


def validate_title(title: str) -> str:
    if not title or not title.strip():
        raise ValidationError("title is required")
    return title


def validate_rule(repeat: str) -> RecurrenceRule:
    # RecurrenceError is a ValidationError; prefix the reason for the client.
    try:
        return parse_rule(repeat)
    except ValidationError as exc:
        raise ValidationError(f"invalid repeat rule: {exc}") from exc


def _parse_day_or_reject(value: str, field: str) -> date:
    try:
        return parse_day(value)
    except ValueError:
        raise ValidationError(f"invalid {field} format, expected YYYYMMDD") from None


class TaskService:
    """Task lifecycle: date normalization on create, advancement or removal on completion."""

    def __init__(self, store: TaskStore, today: Callable[[], date] = date.today) -> None:
        self.store = store
        self.today = today

    def normalize_date(self, value: str) -> str:
        if not value:
            return format_day(self.today())
        _parse_day_or_reject(value, "date")
        return value

    def next_date(self, now: str, day: str, repeat: str) -> str:
        if not now or not day or not repeat:
            raise ValidationError("missing required parameters: now, date, repeat")
        reference = _parse_day_or_reject(now, "now")
        start = _parse_day_or_reject(day, "date")
        return next_occurrence(reference, start, validate_rule(repeat))

    def create_task(self, data: TaskCreate) -> int:
        validate_title(data.title)
        day = self.normalize_date(data.date)
        rule = validate_rule(data.repeat)
        today = self.today()
        if parse_day(day) < today:
            if isinstance(rule, NoRule):
                log.debug("pulling one-shot task forward from %s to today", day)
                day = format_day(today)
            else:
                advanced = next_occurrence(today, day, rule)
                log.debug("advancing recurring task from %s to %s", day, advanced)
                day = advanced
        task_id = self.store.create(day, data.title, data.comment, rule.encode())
        log.info("created task %s due %s", task_id, day)
        return task_id

    def get_task(self, raw_id: Union[int, str, None]) -> Task:
        return self.store.get_by_id(parse_task_id(raw_id))

    def list_tasks(self) -> List[Task]:
        return self.store.list()

    def update_task(self, data: TaskUpdate) -> None:
        task_id = parse_task_id(data.id)
        validate_title(data.title)
        day = self.normalize_date(data.date)
        rule = validate_rule(data.repeat)
        if not self.store.exists(task_id):
            raise NotFoundError("task not found")
        self.store.update(Task(id=task_id, date=day, title=data.title, comment=data.comment, repeat=rule.encode()))
        log.info("updated task %s", task_id)

    def complete_task(self, raw_id: Union[int, str, None]) -> Optional[str]:
        """Mark a task done.

        One-shot tasks are deleted and ``None`` is returned. Recurring tasks
        keep their identity and get the next occurrence after their stored
        date that is on or after today; the new date is returned.
        """
        task_id = parse_task_id(raw_id)
        for _ in range(MAX_ADVANCE_ATTEMPTS):
            task = self.store.get_by_id(task_id)
            rule = parse_rule(task.repeat)
            if isinstance(rule, NoRule):
                self._delete(task_id)
                log.info("completed one-shot task %s, removed", task_id)
                return None
            advanced = next_occurrence(self.today(), task.date, rule)
            if self.store.advance_date(task_id, task.date, advanced):
                log.info("completed task %s, next occurrence %s", task_id, advanced)
                return advanced
            log.warning("task %s changed while completing, retrying", task_id)
        raise StorageError(f"task {task_id} kept changing, gave up after {MAX_ADVANCE_ATTEMPTS} attempts")

    def delete_task(self, raw_id: Union[int, str, None]) -> None:
        task_id = parse_task_id(raw_id)
        self._delete(task_id)
        log.info("deleted task %s", task_id)

    def _delete(self, task_id: int) -> None:
        if self.store.delete(task_id) == 0:
            raise NotFoundError("task not found")
