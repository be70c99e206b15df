# tests/test_core.py

import itertools

import pytest

from barbershop.core import (
    compute_end_time,
    ends_after_midnight,
    generate_day_slots,
    normalize_time,
    overlaps,
    parse_hhmm,
)
from barbershop.errors import InvalidRange, InvalidTimeFormat, ValidationError


@pytest.mark.parametrize("start, duration, expected", [
    ("09:00", 30, "09:30"),
    ("09:45", 30, "10:15"),
    ("10:00", 90, "11:30"),
    ("23:45", 30, "00:15"),
])
def test_compute_end_time(start, duration, expected):
    assert compute_end_time(start, duration) == expected


def test_end_minus_start_is_duration_modulo_a_day():
    for start in range(0, 24 * 60, 37):
        for duration in (1, 15, 30, 45, 90, 600, 1500):
            start_time = f"{start // 60:02d}:{start % 60:02d}"
            end = parse_hhmm(compute_end_time(start_time, duration))
            assert (end - start) % 1440 == duration % 1440


@pytest.mark.parametrize("bad", ["9h00", "24:00", "12:60", "", "abc", "12:5", None])
def test_invalid_time_format(bad):
    with pytest.raises(InvalidTimeFormat):
        parse_hhmm(bad)


def test_invalid_time_format_is_a_validation_error():
    with pytest.raises(ValidationError):
        compute_end_time("25:00", 30)


def test_non_positive_duration_rejected():
    with pytest.raises(InvalidRange):
        compute_end_time("09:00", 0)


def test_normalize_time_zero_pads():
    assert normalize_time("9:05") == "09:05"
    assert normalize_time(" 14:30 ") == "14:30"


def test_ends_after_midnight():
    assert ends_after_midnight("23:45", 30)
    assert ends_after_midnight("23:30", 30)
    assert not ends_after_midnight("23:00", 30)


def test_generate_day_slots():
    assert list(generate_day_slots("09:00", "11:00")) == ["09:00", "09:30", "10:00", "10:30"]
    assert list(generate_day_slots("09:00", "11:00", 45)) == ["09:00", "09:45", "10:30"]


def test_generate_day_slots_is_lazy_and_restartable():
    slots = generate_day_slots("08:00", "20:00", 15)
    assert next(slots) == "08:00"
    assert next(slots) == "08:15"
    assert list(generate_day_slots("08:00", "09:00", 30)) == list(generate_day_slots("08:00", "09:00", 30))


@pytest.mark.parametrize("start, end", [("10:00", "10:00"), ("18:00", "09:00")])
def test_generate_day_slots_invalid_range(start, end):
    with pytest.raises(InvalidRange):
        generate_day_slots(start, end)


def test_generate_day_slots_invalid_step():
    with pytest.raises(InvalidRange):
        generate_day_slots("09:00", "10:00", 0)


def test_overlaps_is_symmetric_and_reflexive():
    points = range(0, 8)
    intervals = [(s, e) for s, e in itertools.product(points, points) if s < e]
    for a, b in itertools.product(intervals, intervals):
        assert overlaps(*a, *b) == overlaps(*b, *a)
    for a in intervals:
        assert overlaps(*a, *a)


def test_adjacent_intervals_do_not_overlap():
    assert not overlaps(540, 570, 570, 600)
    assert overlaps(540, 570, 555, 585)
    assert not overlaps("09:00", "09:30", "09:30", "10:00")
