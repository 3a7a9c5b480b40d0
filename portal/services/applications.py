from flask import current_app

from ..extensions import db
from ..errors import NotFoundError, StageError, StateError, ValidationError
from ..models.application import Application
from ..models.cycle import ApplicationCycle
from ..models.enums import ApplicationStatus, Role, Stage
from ..models.system import System
from ..models.team import Team
from . import stages
from .access import can, can_access_application, can_review_application, require, require_actor
from .policy import Action, is_at_least


def _get(application_id):
    application = db.session.get(Application, application_id)
    if application is None:
        raise NotFoundError(f"Application {application_id} not found.")
    return application


def create_application(actor, team_id, system_id=None, data=None, now=None):
    require_actor(actor)
    require(can(actor, "application", Action.CREATE, owner_id=actor.id), "You cannot apply.")
    cycle = stages.active_cycle(stage=Stage.APPLICATION, now=now)
    if cycle is None:
        raise StageError("Applications are only accepted during the application stage.")
    team = db.session.get(Team, team_id)
    if team is None:
        raise NotFoundError(f"Team {team_id} not found.")
    if system_id is not None:
        system = db.session.get(System, system_id)
        if system is None:
            raise NotFoundError(f"System {system_id} not found.")
        if system.team_id != team.id:
            raise ValidationError("The chosen system does not belong to this team.")

    existing = Application.query.filter_by(user_id=actor.id, application_cycle_id=cycle.id,
                                           team_id=team.id, system_id=system_id).first()
    if existing is not None:
        raise StateError("You already have an application for this team in the current cycle.")

    application = Application(
        user_id=actor.id,
        team_id=team.id,
        system_id=system_id,
        application_cycle_id=cycle.id,
        status=ApplicationStatus.DRAFT,
        internal_status=Stage.APPLICATION,
        data=data or {},
    )
    db.session.add(application)
    db.session.commit()
    current_app.logger.info("User %s created application %s in cycle %s", actor.id, application.id, cycle.id)
    return application


def get_application(actor, application_id):
    require_actor(actor)
    application = _get(application_id)
    require(can_access_application(actor, application, Action.READ), "You cannot view this application.")
    return application


def list_applications(actor, cycle_id=None, team_id=None, system_id=None, user_id=None):
    require_actor(actor)
    q = Application.query
    if Role(actor.role) == Role.APPLICANT:
        q = q.filter(Application.user_id == actor.id)
    elif user_id is not None:
        q = q.filter(Application.user_id == user_id)
    if cycle_id is not None:
        q = q.filter(Application.application_cycle_id == cycle_id)
    if team_id is not None:
        q = q.filter(Application.team_id == team_id)
    if system_id is not None:
        q = q.filter(Application.system_id == system_id)
    rows = q.order_by(Application.id.asc()).all()
    return [a for a in rows if can_access_application(actor, a, Action.READ)]


def update_draft(actor, application_id, data=None, submit=False):
    """Applicant edits: answers and preferences while the draft is open, then submit."""
    require_actor(actor)
    application = _get(application_id)
    require(application.user_id == actor.id, "You can only edit your own application.")
    require(can(actor, "application", Action.UPDATE, owner_id=application.user_id),
            "You cannot edit this application.")
    cycle = db.session.get(ApplicationCycle, application.application_cycle_id)
    if cycle is None or cycle.stage != Stage.APPLICATION:
        raise StageError("Applications can only be edited during the application stage.")
    if application.status != ApplicationStatus.DRAFT:
        raise StateError("This application has already been submitted.")
    if data is not None:
        merged = dict(application.data or {})
        merged.update(data)
        application.data = merged
    if submit:
        application.status = ApplicationStatus.SUBMITTED
    db.session.commit()
    return application


def review(actor, application_id, status=None, decision=None):
    """Staff edits: visible status and internal decision."""
    require_actor(actor)
    application = _get(application_id)
    require(can_review_application(actor, application), "You cannot review this application.")
    if status is not None:
        try:
            application.status = ApplicationStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown application status: {status}.")
        db.session.commit()
    if decision is not None:
        stages.set_decision(application.id, decision)
    return application


def advance(actor, application_id):
    require_actor(actor)
    application = _get(application_id)
    require(can_review_application(actor, application), "You cannot advance this application.")
    return stages.advance(application.id)


def override_stage(actor, application_id, stage):
    require_actor(actor)
    application = _get(application_id)
    require(is_at_least(actor.role, Role.TEAM_MANAGEMENT) and can_review_application(actor, application),
            "Only team management can override an application's stage.")
    try:
        stage = Stage(stage)
    except ValueError:
        raise ValidationError(f"Unknown stage: {stage}.")
    return stages.override_internal_status(application.id, stage)


def delete_application(actor, application_id):
    require_actor(actor)
    application = _get(application_id)
    require(can_access_application(actor, application, Action.DELETE), "Only administrators can delete applications.")
    db.session.delete(application)
    db.session.commit()
    current_app.logger.warning("Application %s deleted by user %s", application_id, actor.id)
