from flask import Response, current_app, jsonify, request
from flask_login import current_user, login_required

from . import bp
from .forms import BookingForm, InterviewFilterForm, InterviewUpdateForm, NoteForm, SlotQueryForm
from ...errors import NotFoundError
from ...services import interviews
from ...services.booking import book_interview, bookable_systems, interview_cycle, own_applications, slots_for
from ...services.ics import build_ics
from ...utils.forms import load, submitted


@bp.get("/bookable-systems")
@login_required
def systems_for_booking():
    applications = own_applications(current_user, interview_cycle())
    if not applications:
        raise NotFoundError("You need an application in the current cycle to book an interview.")
    application = applications[0]
    return jsonify({
        "application_id": application.id,
        "systems": [s.to_dict() for s in bookable_systems(application)],
    })


@bp.get("/slots")
@login_required
def slots():
    form = load(SlotQueryForm, source=request.args.to_dict())
    items = slots_for(current_user, form.system_id.data, form.date.data)
    return jsonify([s.to_dict() for s in items])


@bp.post("")
@login_required
def book():
    form = load(BookingForm)
    interview = book_interview(current_user, form.application_id.data, form.system_id.data, form.start.data)
    return jsonify(interview.to_dict()), 201


@bp.get("")
@login_required
def list_interviews():
    form = load(InterviewFilterForm, source=request.args.to_dict())
    rows = interviews.list_interviews(current_user, system_id=form.system_id.data,
                                      application_id=form.application_id.data)
    return jsonify([iv.to_dict() for iv in rows])


@bp.get("/<int:interview_id>")
@login_required
def detail(interview_id):
    return jsonify(interviews.get_interview(current_user, interview_id).to_dict())


@bp.patch("/<int:interview_id>")
@login_required
def update(interview_id):
    form = load(InterviewUpdateForm)
    interview = interviews.update_interview(current_user, interview_id, **submitted(form))
    return jsonify(interview.to_dict())


@bp.get("/<int:interview_id>/ics")
@login_required
def download_ics(interview_id):
    iv = interviews.get_interview(current_user, interview_id)
    ics = build_ics(current_app.config['UID_DOMAIN'],
                    "Interview",
                    iv.scheduled_at,
                    iv.ends_at,
                    location=iv.location or current_app.config.get('INTERVIEW_LOCATION', ''),
                    uid=f"interview-{iv.id}@{current_app.config['UID_DOMAIN']}")
    return Response(ics, mimetype="text/calendar",
                    headers={"Content-Disposition": f"attachment; filename=interview-{iv.id}.ics"})


@bp.get("/<int:interview_id>/notes")
@login_required
def notes(interview_id):
    return jsonify([n.to_dict() for n in interviews.list_notes(current_user, interview_id)])


@bp.post("/<int:interview_id>/notes")
@login_required
def add_note(interview_id):
    form = load(NoteForm)
    note = interviews.add_note(current_user, interview_id, form.note.data)
    return jsonify(note.to_dict()), 201
