from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from .errors import ValidationError


def _text(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value


@dataclass
class TaskCreate:
    title: str
    date: str = ""
    comment: str = ""
    repeat: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "TaskCreate":
        return cls(
            title=_text(payload, "title"),
            date=_text(payload, "date"),
            comment=_text(payload, "comment"),
            repeat=_text(payload, "repeat"),
        )


@dataclass
class TaskUpdate:
    id: Optional[Union[int, str]]
    title: str
    date: str = ""
    comment: str = ""
    repeat: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "TaskUpdate":
        return cls(
            id=payload.get("id"),
            title=_text(payload, "title"),
            date=_text(payload, "date"),
            comment=_text(payload, "comment"),
            repeat=_text(payload, "repeat"),
        )
