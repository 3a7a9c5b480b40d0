"""Recruitment-cycle state machine.

A cycle moves PREPARATION -> APPLICATION -> INTERVIEW -> TRAIL -> FINAL.
The scheduled sweep moves a cycle into whichever of its stage windows
contains "now" and cascades the outcome onto every application of the cycle;
staff move single applications forward with ``advance``.
"""
from dataclasses import dataclass, field

from flask import current_app

from ..extensions import db, rq
from ..errors import NotFoundError, ValidationError
from ..jobs.notify import notify_stage_update
from ..models.application import Application
from ..models.cycle import ApplicationCycle, CycleStage
from ..models.enums import ApplicationStatus, Stage
from ..utils.timeutil import utcnow

# permitted single-step moves; FINAL is terminal
NEXT_STAGE = {
    Stage.PREPARATION: Stage.APPLICATION,
    Stage.APPLICATION: Stage.INTERVIEW,
    Stage.INTERVIEW: Stage.TRAIL,
    Stage.TRAIL: Stage.FINAL,
    Stage.FINAL: Stage.FINAL,
}

STAGE_ORDER = tuple(Stage)

DECISIONS = (ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED, ApplicationStatus.WAITLISTED)


def _reachable(from_stage):
    seen = []
    cur = from_stage
    while NEXT_STAGE[cur] != cur:
        cur = NEXT_STAGE[cur]
        seen.append(cur)
    return seen


FORWARD = {stage: frozenset(_reachable(stage)) for stage in Stage}


def is_forward(from_stage, to_stage):
    return Stage(to_stage) in FORWARD[Stage(from_stage)]


def is_regression(from_stage, to_stage):
    return Stage(from_stage) in FORWARD[Stage(to_stage)]


def later_of(a, b):
    a, b = Stage(a), Stage(b)
    return b if is_forward(a, b) else a


def next_stage_for(cycle_stage, application_stage):
    """One step past the cycle when the application is at or behind it,
    otherwise one step past the application; FINAL stays FINAL."""
    return NEXT_STAGE[later_of(cycle_stage, application_stage)]


def _get_application(application_id):
    application = db.session.get(Application, application_id)
    if application is None:
        raise NotFoundError(f"Application {application_id} not found.")
    return application


def _get_cycle(cycle_id):
    cycle = db.session.get(ApplicationCycle, cycle_id)
    if cycle is None:
        raise NotFoundError(f"Application cycle {cycle_id} not found.")
    return cycle


def advance(application_id):
    application = _get_application(application_id)
    cycle = _get_cycle(application.application_cycle_id)
    target = next_stage_for(cycle.stage, application.internal_status)
    if target == application.internal_status:
        # already FINAL
        return target
    application.internal_status = target
    db.session.commit()
    current_app.logger.info("Application %s advanced to %s", application.id, target.value)
    return target


def override_internal_status(application_id, stage):
    """Privileged manual stage set; unlike ``advance`` it may move backwards."""
    application = _get_application(application_id)
    stage = Stage(stage)
    if is_regression(application.internal_status, stage):
        current_app.logger.warning("Application %s moved back from %s to %s by override",
                                   application.id, application.internal_status.value, stage.value)
    application.internal_status = stage
    db.session.commit()
    return application


def set_decision(application_id, decision):
    application = _get_application(application_id)
    decision = ApplicationStatus(decision)
    if decision not in DECISIONS:
        raise ValidationError(f"Decision must be one of: {', '.join(d.value for d in DECISIONS)}.")
    application.internal_decision = decision
    db.session.commit()
    return application


def stages_of(cycle_id):
    return (CycleStage.query.filter_by(cycle_id=cycle_id)
            .order_by(CycleStage.start_date.asc()).all())


def active_cycle(stage=None, now=None):
    now = now or utcnow()
    q = ApplicationCycle.query.filter(ApplicationCycle.start_date <= now, ApplicationCycle.end_date >= now)
    if stage is not None:
        q = q.filter(ApplicationCycle.stage == Stage(stage))
    return q.order_by(ApplicationCycle.start_date.desc()).first()


def create_cycle(name, start_date, end_date):
    """Create a cycle with a default timeline: one equal-length window per stage."""
    if not name:
        raise ValidationError("Cycle name is required.")
    if end_date <= start_date:
        raise ValidationError("Cycle end date must be after its start date.")
    cycle = ApplicationCycle(name=name, stage=Stage.PREPARATION, start_date=start_date, end_date=end_date)
    db.session.add(cycle)
    db.session.flush()
    step = (end_date - start_date) / len(STAGE_ORDER)
    for i, stage in enumerate(STAGE_ORDER):
        db.session.add(CycleStage(
            cycle_id=cycle.id,
            stage=stage,
            start_date=start_date + step * i,
            end_date=start_date + step * (i + 1),
        ))
    db.session.commit()
    return cycle


def update_stage_window(stage_id, start_date, end_date):
    stage = db.session.get(CycleStage, stage_id)
    if stage is None:
        raise NotFoundError(f"Cycle stage {stage_id} not found.")
    if end_date <= start_date:
        raise ValidationError("Stage end date must be after its start date.")
    cycle = _get_cycle(stage.cycle_id)
    if start_date < cycle.start_date:
        raise ValidationError("Stage cannot start before its cycle starts.")
    if end_date > cycle.end_date:
        cycle.end_date = end_date
    stage.start_date = start_date
    stage.end_date = end_date
    db.session.commit()
    return stage


def set_cycle_stage(cycle_id, stage):
    cycle = _get_cycle(cycle_id)
    cycle.stage = Stage(stage)
    db.session.commit()
    current_app.logger.info("Cycle %s manually set to %s", cycle.id, cycle.stage.value)
    return cycle


def delete_cycle(cycle_id):
    cycle = _get_cycle(cycle_id)
    CycleStage.query.filter_by(cycle_id=cycle.id).delete()
    db.session.delete(cycle)
    db.session.commit()


def cascade_outcome(application):
    """Staff decisions win; otherwise pending reviews hold, everything else is rejected."""
    if application.internal_decision is not None:
        return application.internal_decision
    if application.has_pending_review():
        return ApplicationStatus.NEEDS_REVIEW
    return ApplicationStatus.REJECTED


@dataclass
class SweepResult:
    cycles: int = 0
    transitions: list = field(default_factory=list)
    failed: list = field(default_factory=list)

    @property
    def ok(self):
        return not self.failed

    def to_dict(self):
        return {"ok": self.ok, "cycles": self.cycles, "transitions": self.transitions, "failed": self.failed}


def _sweep_cycle(cycle, now):
    """Apply every due stage change of one cycle; returns (stage, changed ids) pairs."""
    moves = []
    for stage in stages_of(cycle.id):
        if not stage.contains(now) or stage.stage == cycle.stage:
            continue
        if not is_forward(cycle.stage, stage.stage):
            current_app.logger.warning("Cycle %s moving backwards from %s to %s",
                                       cycle.id, cycle.stage.value, stage.stage.value)
        cycle.stage = stage.stage
        changed = []
        for application in Application.query.filter_by(application_cycle_id=cycle.id).all():
            outcome = cascade_outcome(application)
            if application.status != outcome:
                application.status = outcome
                changed.append(application.id)
        moves.append((stage.stage, changed))
    # stage change and cascade land in one commit
    db.session.commit()
    return moves


def sweep(now=None):
    now = now or utcnow()
    result = SweepResult()
    cycles = ApplicationCycle.query.filter(ApplicationCycle.start_date <= now,
                                           ApplicationCycle.end_date >= now).all()
    for cycle in cycles:
        result.cycles += 1
        try:
            moves = _sweep_cycle(cycle, now)
        except Exception:
            db.session.rollback()
            current_app.logger.exception("Sweep failed for cycle %s", cycle.id)
            result.failed.append(cycle.id)
            continue
        for stage, changed in moves:
            current_app.logger.info("Cycle %s moved to %s, %d applications updated",
                                    cycle.id, stage.value, len(changed))
            result.transitions.append({"cycle_id": cycle.id, "stage": stage.value, "updated": len(changed)})
            if changed:
                rq.enqueue(notify_stage_update, cycle.id, stage.value, changed)
    return result
