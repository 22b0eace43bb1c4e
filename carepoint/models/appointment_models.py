# /carepoint/models/appointment_models.py
from datetime import datetime, timedelta

COLLECTION = 'appointments'


class AppointmentStatus:
    SCHEDULED = 'Scheduled'
    CONFIRMED = 'Confirmed'
    CHECKED_IN = 'CheckedIn'
    COMPLETED = 'Completed'
    CANCELLED = 'Cancelled'

    ALL = (SCHEDULED, CONFIRMED, CHECKED_IN, COMPLETED, CANCELLED)
    # Statuses that hold a (doctor, date, slot) triple.
    OCCUPYING = (SCHEDULED, CONFIRMED, CHECKED_IN)
    TERMINAL = (COMPLETED, CANCELLED)
    CHECK_IN_ALLOWED = (SCHEDULED, CONFIRMED)


def build_slot_catalog(start_hour=9, end_hour=17, slot_minutes=30):
    """Returns the daily slot labels, e.g. ``['09:00-09:30', '09:30-10:00', ...]``."""
    slots = []
    cursor = datetime(2000, 1, 1, start_hour, 0)
    end = datetime(2000, 1, 1, end_hour, 0)
    step = timedelta(minutes=slot_minutes)
    while cursor + step <= end:
        slots.append(f"{cursor:%H:%M}-{cursor + step:%H:%M}")
        cursor += step
    return slots


def slot_start(time_slot: str) -> str:
    """``'09:00-09:30'`` -> ``'09:00'``."""
    return time_slot.split('-', 1)[0].strip()
