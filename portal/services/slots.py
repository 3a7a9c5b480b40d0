"""Turn interviewer availability windows into bookable 30-minute slots."""
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from ..utils.timeutil import day_bounds, floor_minute, utcnow
from .availability_store import interviews_on, windows_for

SLOT_MINUTES = 30
SLOT = timedelta(minutes=SLOT_MINUTES)


@dataclass
class Slot:
    start: object
    end: object
    available: bool
    interviewer_id: Optional[int] = None

    def to_dict(self):
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "available": self.available,
            "interviewer_id": self.interviewer_id,
        }


def round_up_to_slot(dt):
    dt = dt.replace(microsecond=0)
    past = (dt.minute % SLOT_MINUTES) * 60 + dt.second
    if past == 0:
        return dt
    return dt + timedelta(seconds=SLOT_MINUTES * 60 - past)


def overlaps(start, end, busy_start, busy_end):
    """Three-way interval test used both for display and for the booking re-check."""
    return ((busy_start <= start < busy_end)
            or (busy_start < end <= busy_end)
            or (start <= busy_start and end >= busy_end))


def conflicts_with_any(start, end, interviews):
    start, end = floor_minute(start), floor_minute(end)
    for interview in interviews:
        busy_start = floor_minute(interview.scheduled_at)
        if overlaps(start, end, busy_start, busy_start + timedelta(minutes=interview.duration or SLOT_MINUTES)):
            return True
    return False


def slots_for_window(window, day, interviews, now):
    day_start, day_end = day_bounds(day)
    clipped_start = max(floor_minute(window.start), day_start)
    clipped_end = min(floor_minute(window.end), day_end)
    if clipped_start >= clipped_end:
        return []
    out = []
    t = round_up_to_slot(clipped_start)
    while t + SLOT <= clipped_end:
        if t > now:
            out.append(Slot(
                start=t,
                end=t + SLOT,
                available=not conflicts_with_any(t, t + SLOT, interviews),
                interviewer_id=getattr(window, "user_id", None),
            ))
        t += SLOT
    return out


def generate_slots(windows, interviews, day, now=None):
    """Slots for ``day`` from every window, sorted, one entry per start time."""
    now = floor_minute(now or utcnow())
    slots = []
    for window in windows:
        slots.extend(slots_for_window(window, day, interviews, now))
    slots.sort(key=lambda s: s.start)
    unique = []
    for slot in slots:
        if unique and unique[-1].start == slot.start:
            continue
        unique.append(slot)
    return unique


def available_slots(system_id, day, now=None):
    return generate_slots(windows_for(system_id, day), interviews_on(day), day, now=now)


def find_slot(system_id, start, now=None):
    """The slot of ``system_id`` that starts exactly at ``start``, or None.

    Only starts the generator would offer count: on a slot boundary, fully
    inside one availability window, and after ``now``.
    """
    now = floor_minute(now or utcnow())
    for window in windows_for(system_id, start):
        for slot in slots_for_window(window, start, [], now):
            if slot.start == start:
                return slot
    return None
