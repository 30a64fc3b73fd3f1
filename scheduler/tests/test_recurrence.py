from datetime import date, datetime, timedelta

import pytest

from scheduler.errors import ValidationError
from scheduler.recurrence import (
    AdvanceError,
    AdvanceErrorKind,
    Daily,
    NoRule,
    RecurrenceError,
    Yearly,
    format_day,
    next_occurrence,
    parse_day,
    parse_rule,
)


def test_parse_empty_is_no_rule():
    assert parse_rule("") == NoRule()


@pytest.mark.parametrize("value, interval", [("d 1", 1), ("d 7", 7), ("d 400", 400), ("d 030", 30)])
def test_parse_daily(value, interval):
    assert parse_rule(value) == Daily(interval)


def test_parse_yearly():
    assert parse_rule("y") == Yearly()


@pytest.mark.parametrize(
    "value, reason",
    [
        ("d 0", "invalid or out-of-range interval"),
        ("d 401", "invalid or out-of-range interval"),
        ("d -3", "invalid or out-of-range interval"),
        ("d", "invalid or out-of-range interval"),
        ("d x", "invalid or out-of-range interval"),
        ("d 3_0", "invalid or out-of-range interval"),
        ("y 1", "yearly rule takes no parameters"),
        ("w 1", "unsupported rule"),
        ("m", "unsupported rule"),
        ("d 1 2", "unsupported rule"),
        ("d  1", "unsupported rule"),
        (" d 1", "unsupported rule"),
    ],
)
def test_parse_rejects(value, reason):
    with pytest.raises(RecurrenceError) as excinfo:
        parse_rule(value)
    assert excinfo.value.reason == reason


def test_recurrence_error_is_validation_error():
    with pytest.raises(ValidationError):
        parse_rule("d 0")


@pytest.mark.parametrize("value", ["", "d", "y", "d 5", "y y", "z 1 2", "\t", "d 9999999999999999999"])
def test_parse_is_total(value):
    try:
        rule = parse_rule(value)
    except RecurrenceError:
        return
    assert isinstance(rule, (NoRule, Daily, Yearly))


def test_encode_matches_wire_form():
    assert Daily(3).encode() == "d 3"
    assert Yearly().encode() == "y"
    assert NoRule().encode() == ""


@pytest.mark.parametrize("value", ["2025311", "2025-03-01", "20250230", "20251301", "abcdefgh", "", "２０２５０３０１"])
def test_parse_day_rejects(value):
    with pytest.raises(ValueError):
        parse_day(value)


def test_day_round_trip():
    for text in ("20240229", "20250101", "19991231"):
        assert format_day(parse_day(text)) == text


def test_daily_boundary_is_inclusive():
    assert next_occurrence(date(2025, 3, 10), "20250301", Daily(3)) == "20250310"


def test_yearly_skips_to_first_future_anniversary():
    assert next_occurrence(date(2025, 1, 1), "20240615", Yearly()) == "20250615"


def test_yearly_leap_day_rolls_into_march():
    assert next_occurrence(date(2024, 3, 1), "20240229", Yearly()) == "20250301"


def test_future_date_still_steps_once():
    assert next_occurrence(date(2025, 1, 1), "20250110", Daily(5)) == "20250115"


def test_skips_missed_occurrences_in_one_call():
    assert next_occurrence(date(2025, 1, 8), "20250101", Daily(1)) == "20250108"


def test_time_of_day_is_ignored():
    assert next_occurrence(datetime(2025, 3, 10, 23, 59), "20250301", Daily(3)) == "20250310"


def test_missing_rule():
    for rule in (NoRule(), None):
        with pytest.raises(AdvanceError) as excinfo:
            next_occurrence(date(2025, 1, 1), "20250101", rule)
        assert excinfo.value.kind is AdvanceErrorKind.MISSING_RULE


def test_invalid_date():
    with pytest.raises(AdvanceError) as excinfo:
        next_occurrence(date(2025, 1, 1), "2025-01-01", Daily(1))
    assert excinfo.value.kind is AdvanceErrorKind.INVALID_DATE


@pytest.mark.parametrize("interval", [1, 2, 7, 30, 400])
def test_daily_result_is_minimal(interval):
    start = date(2024, 2, 20)
    now = date(2025, 3, 10)
    result = parse_day(next_occurrence(now, start, Daily(interval)))
    assert result >= now
    assert (result - start).days % interval == 0
    previous = result - timedelta(days=interval)
    assert previous < now or previous == start


def test_reapplying_advances_exactly_one_step():
    now = date(2025, 3, 10)
    first = next_occurrence(now, "20250301", Daily(3))
    assert next_occurrence(now, first, Daily(3)) == "20250313"


@pytest.mark.parametrize(
    "now, day, rule",
    [
        (date(9999, 12, 31), "99991230", Yearly()),
        (date(9999, 12, 31), "99991231", Daily(1)),
        (date(9999, 12, 31), "99990101", Daily(400)),
    ],
)
def test_step_past_year_9999_is_invalid_date(now, day, rule):
    with pytest.raises(AdvanceError) as excinfo:
        next_occurrence(now, day, rule)
    assert excinfo.value.kind is AdvanceErrorKind.INVALID_DATE
