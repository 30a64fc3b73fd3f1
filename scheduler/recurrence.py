from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

from .errors import SchedulerError, ValidationError

DATE_FORMAT = "%Y%m%d"
DAILY = "d"
YEARLY = "y"
MAX_INTERVAL = 400

_DAY_RE = re.compile(r"[0-9]{8}")
_INTERVAL_RE = re.compile(r"[+-]?[0-9]+")


class RecurrenceError(ValidationError):
    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class AdvanceErrorKind(str, enum.Enum):
    MISSING_RULE = "missing_rule"
    INVALID_DATE = "invalid_date"


class AdvanceError(SchedulerError):
    def __init__(self, kind: AdvanceErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


@dataclass(frozen=True)
class NoRule:
    def encode(self) -> str:
        return ""


@dataclass(frozen=True)
class Daily:
    interval: int

    def encode(self) -> str:
        return f"{DAILY} {self.interval}"


@dataclass(frozen=True)
class Yearly:
    def encode(self) -> str:
        return YEARLY


RecurrenceRule = Union[NoRule, Daily, Yearly]


def parse_day(value: str) -> date:
    """Parse a strict ``YYYYMMDD`` string; anything else raises ``ValueError``."""
    if not isinstance(value, str) or not _DAY_RE.fullmatch(value):
        raise ValueError(f"invalid date {value!r}, expected YYYYMMDD")
    return datetime.strptime(value, DATE_FORMAT).date()


def format_day(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def parse_rule(repeat: str) -> RecurrenceRule:
    if not repeat:
        return NoRule()
    parts = repeat.split(" ")
    if len(parts) > 2:
        raise RecurrenceError("unsupported rule")
    head, params = parts[0], parts[1:]
    if head == DAILY:
        if len(params) != 1 or not _INTERVAL_RE.fullmatch(params[0]):
            raise RecurrenceError("invalid or out-of-range interval")
        interval = int(params[0])
        if not 0 < interval <= MAX_INTERVAL:
            raise RecurrenceError("invalid or out-of-range interval")
        return Daily(interval)
    if head == YEARLY:
        if params:
            raise RecurrenceError("yearly rule takes no parameters")
        return Yearly()
    raise RecurrenceError("unsupported rule")


def _step(day: date, rule: RecurrenceRule) -> date:
    if isinstance(rule, Daily):
        return day + timedelta(days=rule.interval)
    candidate = day + relativedelta(years=1)
    # relativedelta clamps Feb 29 to Feb 28; roll over into March instead.
    if day.month == 2 and day.day == 29 and candidate.day == 28:
        candidate += timedelta(days=1)
    return candidate


def next_occurrence(
    now: Union[date, datetime], day: Union[str, date], rule: Optional[RecurrenceRule]
) -> str:
    """Return the first occurrence of ``rule`` after ``day`` that is on or after ``now``.

    At least one step is always taken, so a ``day`` already in the future still
    moves forward once. Missed occurrences are skipped in a single call.
    """
    if rule is None or isinstance(rule, NoRule):
        raise AdvanceError(AdvanceErrorKind.MISSING_RULE, "repetition rule is missing")
    if isinstance(day, str):
        try:
            day = parse_day(day)
        except ValueError as exc:
            raise AdvanceError(AdvanceErrorKind.INVALID_DATE, str(exc)) from exc
    elif isinstance(day, datetime):
        day = day.date()
    if isinstance(now, datetime):
        now = now.date()
    try:
        candidate = _step(day, rule)
        while candidate < now:
            candidate = _step(candidate, rule)
    except (ValueError, OverflowError) as exc:
        raise AdvanceError(AdvanceErrorKind.INVALID_DATE, f"next occurrence is out of range: {exc}") from exc
    return format_day(candidate)
