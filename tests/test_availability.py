# tests/test_availability.py

from datetime import timedelta

import pytest

from barbershop.availability import available_slots, is_available
from barbershop.errors import NotFound, SlotUnavailable

from conftest import DAY, insert_appointment as book


def test_free_day_is_available(store, shop):
    assert is_available(store, shop.barber.id, DAY, "09:00", "09:30")


def test_overlapping_interval_is_unavailable(store, shop):
    book(store, shop, "09:00", "09:30")
    assert not is_available(store, shop.barber.id, DAY, "09:15", "09:45")
    assert not is_available(store, shop.barber.id, DAY, "08:45", "09:15")
    assert not is_available(store, shop.barber.id, DAY, "09:00", "09:30")
    assert not is_available(store, shop.barber.id, DAY, "08:00", "10:00")


def test_adjacent_interval_is_available(store, shop):
    book(store, shop, "09:00", "09:30")
    assert is_available(store, shop.barber.id, DAY, "09:30", "10:00")
    assert is_available(store, shop.barber.id, DAY, "08:30", "09:00")


def test_cancelled_appointments_do_not_block(store, shop):
    book(store, shop, "09:00", "09:30", status="cancelled")
    assert is_available(store, shop.barber.id, DAY, "09:00", "09:30")


def test_completed_appointments_still_block(store, shop):
    book(store, shop, "09:00", "09:30", status="completed")
    assert not is_available(store, shop.barber.id, DAY, "09:00", "09:30")


def test_other_barber_and_other_date_do_not_block(store, shop):
    book(store, shop, "09:00", "09:30", barber=shop.second_barber)
    book(store, shop, "09:00", "09:30", on_date=DAY + timedelta(days=1))
    assert is_available(store, shop.barber.id, DAY, "09:00", "09:30")


def test_excluded_appointment_is_ignored(store, shop):
    appt = book(store, shop, "09:00", "09:30")
    assert is_available(store, shop.barber.id, DAY, "09:15", "09:45", exclude_appointment_id=appt.id)


def test_unique_slot_index_backstops_double_booking(store, shop):
    book(store, shop, "09:00", "09:30")
    with pytest.raises(SlotUnavailable):
        book(store, shop, "09:00", "09:30")


def test_unique_slot_index_ignores_cancelled(store, shop):
    book(store, shop, "09:00", "09:30", status="cancelled")
    assert book(store, shop, "09:00", "09:30").id is not None


def test_available_slots_skip_booked_time(store, shop):
    book(store, shop, "09:30", "10:00")
    assert available_slots(store, shop.barber.id, DAY, step_minutes=30) == ["09:00", "10:00", "10:30"]


def test_available_slots_respect_service_length_and_closing(store, shop):
    book(store, shop, "09:30", "10:00")
    slots = available_slots(store, shop.barber.id, DAY, step_minutes=30, duration_minutes=60)
    assert slots == ["10:00"]


def test_no_slots_on_a_day_off(store, shop):
    assert available_slots(store, shop.barber.id, DAY + timedelta(days=1)) == []


def test_no_slots_when_day_marked_unavailable(store, shop, session):
    barber = shop.barber
    barber.working_hours = [{"day": DAY.weekday(), "start": "09:00", "end": "11:00", "is_available": False}]
    store.save_barber(barber)
    assert available_slots(store, barber.id, DAY) == []


def test_available_slots_unknown_barber(store, shop):
    with pytest.raises(NotFound):
        available_slots(store, 9999, DAY)
