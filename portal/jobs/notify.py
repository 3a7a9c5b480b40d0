from datetime import timedelta

from flask import current_app

from ..extensions import db
from ..models.application import Application
from ..models.cycle import ApplicationCycle
from ..models.interview import Interview
from ..models.notification import Notification
from ..models.system import System
from ..models.team import Team
from ..models.user import User
from ..services.ics import build_ics
from ..services.mail import MailNotConfigured, send_batch, send_mail
from ..utils.timeutil import utcnow


def chunked(items, size):
    for i in range(0, len(items), size):
        yield items[i:i + size]


def already_sent(key):
    n = Notification.query.filter_by(idempotency_key=key).first()
    return n is not None and n.status == "sent"


def record(key, kind, application_id, to_email, subject, body, status, provider_message_id=None, error=None):
    n = Notification.query.filter_by(idempotency_key=key).first()
    if n is None:
        n = Notification(idempotency_key=key)
        db.session.add(n)
    n.kind = kind
    n.application_id = application_id
    n.sent_to = to_email
    n.subject = subject
    n.body = body
    n.status = status
    n.provider_message_id = provider_message_id
    n.error = error
    n.sent_at = utcnow() if status == "sent" else None
    db.session.commit()
    return n


def interview_invitation(interview, applicant, system, team):
    location = interview.location or current_app.config.get("INTERVIEW_LOCATION", "")
    when = interview.scheduled_at
    subject = f"Interview scheduled: {team.name if team else 'Recruitment'}"
    body = (
        f"Hello {applicant.name or applicant.email},\n\n"
        f"Your interview{' for ' + system.name if system else ''} is confirmed.\n"
        f"Date: {when:%A, %B %d, %Y}\n"
        f"Time: {when:%H:%M} UTC\n"
        f"Duration: {interview.duration} minutes\n"
        f"Location: {location}\n\n"
        "A calendar invitation is attached.\n"
    )
    ics = build_ics(
        current_app.config.get("UID_DOMAIN", "example.local"),
        subject,
        when,
        when + timedelta(minutes=interview.duration),
        location=location,
        description=body,
        attendee=applicant.email,
        uid=f"interview-{interview.id}@{current_app.config.get('UID_DOMAIN', 'example.local')}",
    )
    return subject, body, ics


def notify_interview_booked(interview_id):
    interview = db.session.get(Interview, interview_id)
    if interview is None or interview.application_id is None:
        current_app.logger.warning("Interview %s has no application to notify", interview_id)
        return None
    application = db.session.get(Application, interview.application_id)
    applicant = db.session.get(User, application.user_id)
    system = db.session.get(System, interview.system_id) if interview.system_id else None
    team = db.session.get(Team, application.team_id)

    key = f"interview-booked:{interview.id}"
    if already_sent(key):
        return None
    subject, body, ics = interview_invitation(interview, applicant, system, team)
    try:
        _, message_id = send_mail(applicant.email, subject, body, ics=ics)
    except MailNotConfigured:
        current_app.logger.warning("Mail not configured; interview %s confirmation not sent", interview.id)
        return record(key, "interview_booked", application.id, applicant.email, subject, body, "skipped").id
    except Exception as e:
        current_app.logger.exception("Interview %s confirmation failed", interview.id)
        return record(key, "interview_booked", application.id, applicant.email, subject, body, "failed", error=str(e)).id
    return record(key, "interview_booked", application.id, applicant.email, subject, body, "sent",
                  provider_message_id=message_id).id


def stage_update_message(applicant, team):
    team_name = team.name if team else "the"
    subject = f"Application Update for {team_name}"
    body = (
        f"Hello {applicant.name or applicant.email},\n\n"
        f"Your application for the {team_name} team has been updated.\n\n"
        "Best regards,\nRecruitment Team\n"
    )
    return subject, body


def notify_stage_update(cycle_id, stage, application_ids):
    """Tell applicants their application changed after a stage transition.

    Messages go out in chunks of NOTIFY_BATCH_SIZE, one chunk after another;
    a failing chunk is logged and the next one is still sent.
    """
    cycle = db.session.get(ApplicationCycle, cycle_id)
    if cycle is None:
        return {"sent": 0, "failed": 0, "skipped": 0}
    pending = []
    skipped = 0
    for application in Application.query.filter(Application.id.in_(application_ids)).all():
        key = f"stage:{cycle.id}:{stage}:application:{application.id}"
        if already_sent(key):
            skipped += 1
            continue
        applicant = db.session.get(User, application.user_id)
        team = db.session.get(Team, application.team_id)
        subject, body = stage_update_message(applicant, team)
        pending.append({"key": key, "application_id": application.id,
                        "to": applicant.email, "subject": subject, "body": body})

    sent = failed = 0
    size = current_app.config.get("NOTIFY_BATCH_SIZE", 100)
    for chunk in chunked(pending, size):
        try:
            results = send_batch(chunk)
        except MailNotConfigured:
            current_app.logger.warning("Mail not configured; %d stage updates for cycle %s not sent",
                                       len(chunk), cycle.id)
            for m in chunk:
                skipped += 1
                record(m["key"], "stage_update", m["application_id"], m["to"], m["subject"], m["body"],
                       "skipped")
            continue
        except Exception as e:
            current_app.logger.exception("Stage update chunk of %d messages failed", len(chunk))
            results = [(False, str(e))] * len(chunk)
        for m, (ok, info) in zip(chunk, results):
            if ok:
                sent += 1
                record(m["key"], "stage_update", m["application_id"], m["to"], m["subject"], m["body"],
                       "sent", provider_message_id=info)
            else:
                failed += 1
                record(m["key"], "stage_update", m["application_id"], m["to"], m["subject"], m["body"],
                       "failed", error=info)
    current_app.logger.info("Stage update notifications for cycle %s: sent=%d failed=%d skipped=%d",
                            cycle.id, sent, failed, skipped)
    return {"sent": sent, "failed": failed, "skipped": skipped}
