from datetime import datetime, timedelta, timezone


def utcnow():
    """Naive UTC now; every datetime column stores naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(dt):
    if dt.tzinfo:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def floor_minute(dt):
    return dt.replace(second=0, microsecond=0)


def day_bounds(day):
    start = datetime(day.year, day.month, day.day)
    return start, start + timedelta(days=1)
