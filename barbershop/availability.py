# barbershop/availability.py

import logging
from datetime import date as Date
from typing import List, Optional

from barbershop.core import generate_day_slots, overlaps, parse_hhmm
from barbershop.errors import NotFound
from barbershop.schemas import AppointmentStatus
from barbershop.store import AppointmentStore

logger = logging.getLogger(__name__)


def is_available(
    store: AppointmentStore,
    barber_id: int,
    on_date: Date,
    candidate_start: str,
    candidate_end: str,
    exclude_appointment_id: Optional[int] = None,
) -> bool:
    """Return False if [candidate_start, candidate_end) overlaps any live
    appointment of the barber on that date.

    Read only; the unique slot index in the database is what finally
    rejects a booking that races past this check.
    """
    start = parse_hhmm(candidate_start)
    end = parse_hhmm(candidate_end)

    booked = store.list_appointments(
        barber_id=barber_id,
        on_date=on_date,
        exclude_status=AppointmentStatus.cancelled.value,
        exclude_id=exclude_appointment_id,
    )
    for appt in booked:
        if overlaps(start, end, parse_hhmm(appt.start_time), parse_hhmm(appt.end_time)):
            logger.info(
                "Barber %s busy on %s: %s-%s overlaps appointment %s",
                barber_id, on_date, candidate_start, candidate_end, appt.id,
            )
            return False
    return True


def available_slots(
    store: AppointmentStore,
    barber_id: int,
    on_date: Date,
    step_minutes: int = 30,
    duration_minutes: Optional[int] = None,
) -> List[str]:
    """Free start times for a barber on a date.

    Slots come from the barber's working hours for that weekday; a slot is
    kept when ``[slot, slot + duration)`` fits before closing time and does
    not touch a live appointment.
    """
    barber = store.get_barber(barber_id)
    if barber is None:
        raise NotFound(f"Barber not found with id {barber_id}")

    # 1) Working day?
    weekday = on_date.weekday()
    work_day = next((d for d in barber.working_hours if d.get("day") == weekday), None)
    if work_day is None or not work_day.get("is_available", True):
        return []

    # 2) Busy intervals for that day
    busy = [
        (parse_hhmm(a.start_time), parse_hhmm(a.end_time))
        for a in store.list_appointments(
            barber_id=barber_id,
            on_date=on_date,
            exclude_status=AppointmentStatus.cancelled.value,
        )
    ]

    # 3) Generate slots, drop the ones that collide or run past closing
    length = duration_minutes or step_minutes
    close = parse_hhmm(work_day["end"])
    available = []
    for slot in generate_day_slots(work_day["start"], work_day["end"], step_minutes):
        slot_start = parse_hhmm(slot)
        slot_end = slot_start + length
        if slot_end > close:
            continue
        if any(overlaps(slot_start, slot_end, b_start, b_end) for b_start, b_end in busy):
            continue
        available.append(slot)
    return available
