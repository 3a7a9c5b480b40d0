from uuid import uuid4

from ..utils.timeutil import to_naive_utc, utcnow


def _escape(text):
    return (str(text or "")
            .replace("\\", "\\\\")
            .replace(";", "\\;")
            .replace(",", "\\,")
            .replace("\n", "\\n"))


def _to_dt(dt):
    # naive values are UTC already
    return to_naive_utc(dt).strftime('%Y%m%dT%H%M%SZ')


def build_ics(uid_domain, title, start, end, location="", description="", attendee=None, uid=None):
    uid = uid or f"{uuid4()}@{uid_domain}"
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//RecruitmentPortal//Interview//EN",
        "METHOD:REQUEST",
        "BEGIN:VEVENT",
        f"UID:{uid}",
        f"DTSTAMP:{_to_dt(utcnow())}",
        f"DTSTART:{_to_dt(start)}",
        f"DTEND:{_to_dt(end)}",
        f"SUMMARY:{_escape(title)}",
        f"LOCATION:{_escape(location)}",
        f"DESCRIPTION:{_escape(description)}",
    ]
    if attendee:
        lines.append(f"ATTENDEE;ROLE=REQ-PARTICIPANT;RSVP=TRUE:mailto:{attendee}")
    lines += ["END:VEVENT", "END:VCALENDAR"]
    return "\r\n".join(lines) + "\r\n"
