from __future__ import annotations

from typing import Dict, Iterable, List

from ..models import Task


def task_payload(task: Task) -> Dict[str, str]:
    return {
        "id": str(task.id),
        "date": task.date,
        "title": task.title,
        "comment": task.comment or "",
        "repeat": task.repeat or "",
    }


def task_list_payload(tasks: Iterable[Task]) -> Dict[str, List[Dict[str, str]]]:
    return {"tasks": [task_payload(task) for task in tasks]}


def error_payload(message: str) -> Dict[str, str]:
    return {"error": message}
