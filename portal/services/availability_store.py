"""Read side of interview scheduling: declared windows and booked interviews."""
from ..models.availability import Availability
from ..models.interview import Interview
from ..utils.timeutil import day_bounds


def windows_for(system_id, day):
    """Availability rows of ``system_id`` overlapping ``day``."""
    day_start, day_end = day_bounds(day)
    return (Availability.query
            .filter(Availability.system_id == system_id,
                    Availability.end > day_start,
                    Availability.start < day_end)
            .order_by(Availability.start.asc())
            .all())


def interviews_on(day):
    """Every interview scheduled on ``day``, whatever its system."""
    day_start, day_end = day_bounds(day)
    return (Interview.query
            .filter(Interview.scheduled_at >= day_start, Interview.scheduled_at < day_end)
            .order_by(Interview.scheduled_at.asc())
            .all())


def interviews_for_application(application_id, system_id=None):
    q = Interview.query.filter(Interview.application_id == application_id)
    if system_id is not None:
        q = q.filter(Interview.system_id == system_id)
    return q.all()
