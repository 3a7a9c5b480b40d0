from ..extensions import db
from ..errors import NotFoundError, ValidationError
from ..models.application import Application
from ..models.enums import InterviewStatus, Role
from ..models.interview import Interview, InterviewNote
from .access import can_access_interview, can_annotate_interview, require, require_actor
from .policy import Action


def get_interview(actor, interview_id):
    require_actor(actor)
    interview = db.session.get(Interview, interview_id)
    if interview is None:
        raise NotFoundError(f"Interview {interview_id} not found.")
    require(can_access_interview(actor, interview, Action.READ), "You cannot view this interview.")
    return interview


def list_interviews(actor, system_id=None, application_id=None):
    """Interviews the actor may read, newest first. Applicants only ever see their own."""
    require_actor(actor)
    q = Interview.query
    if Role(actor.role) == Role.APPLICANT:
        own = db.session.query(Application.id).filter(Application.user_id == actor.id)
        q = q.filter(Interview.application_id.in_(own))
    if system_id is not None:
        q = q.filter(Interview.system_id == system_id)
    if application_id is not None:
        q = q.filter(Interview.application_id == application_id)
    rows = q.order_by(Interview.scheduled_at.desc()).all()
    return [iv for iv in rows if can_access_interview(actor, iv, Action.READ)]


def update_interview(actor, interview_id, notes=None, status=None):
    """Only notes and status change after booking; the slot itself is fixed."""
    interview = get_interview(actor, interview_id)
    require(can_access_interview(actor, interview, Action.UPDATE), "You cannot update this interview.")
    if status is not None:
        try:
            interview.status = InterviewStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown interview status: {status}.")
    if notes is not None:
        interview.notes = notes
    db.session.commit()
    return interview


def list_notes(actor, interview_id):
    interview = get_interview(actor, interview_id)
    require(can_annotate_interview(actor, interview), "Only staff can read interview notes.")
    return (InterviewNote.query.filter_by(interview_id=interview.id)
            .order_by(InterviewNote.created_at.asc(), InterviewNote.id.asc()).all())


def add_note(actor, interview_id, note):
    interview = get_interview(actor, interview_id)
    require(can_annotate_interview(actor, interview), "Only staff can add interview notes.")
    if not note or not note.strip():
        raise ValidationError("Note text is required.")
    row = InterviewNote(interview_id=interview.id, note=note.strip(), created_by_id=actor.id)
    db.session.add(row)
    db.session.commit()
    return row
