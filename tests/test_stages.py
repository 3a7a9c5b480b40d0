import itertools
from datetime import datetime, timedelta

import pytest

from portal.errors import ValidationError
from portal.extensions import db
from portal.models import ApplicationStatus, Notification, Stage
from portal.services import stages

NOW = datetime(2030, 1, 25, 12, 0)  # inside the INTERVIEW window of the default test cycle


def test_next_stage_table():
    assert stages.next_stage_for(Stage.INTERVIEW, Stage.APPLICATION) == Stage.TRAIL
    assert stages.next_stage_for(Stage.APPLICATION, Stage.INTERVIEW) == Stage.TRAIL
    assert stages.next_stage_for(Stage.APPLICATION, Stage.APPLICATION) == Stage.INTERVIEW
    assert stages.next_stage_for(Stage.PREPARATION, Stage.TRAIL) == Stage.FINAL
    assert stages.next_stage_for(Stage.FINAL, Stage.FINAL) == Stage.FINAL


def test_next_stage_never_regresses():
    for cycle_stage, app_stage in itertools.product(Stage, repeat=2):
        target = stages.next_stage_for(cycle_stage, app_stage)
        assert not stages.is_regression(app_stage, target)
        assert target == app_stage == Stage.FINAL or stages.is_forward(app_stage, target)


def test_forward_map():
    assert stages.is_forward(Stage.PREPARATION, Stage.FINAL)
    assert not stages.is_forward(Stage.FINAL, Stage.PREPARATION)
    assert not stages.is_forward(Stage.INTERVIEW, Stage.INTERVIEW)
    assert stages.FORWARD[Stage.FINAL] == frozenset()


def test_advance_moves_past_the_cycle(app, make_team, make_user, make_cycle, make_application):
    team = make_team()
    application = make_application(make_user(), team, make_cycle(Stage.INTERVIEW),
                                   internal_status=Stage.APPLICATION)
    assert stages.advance(application.id) == Stage.TRAIL
    assert application.internal_status == Stage.TRAIL


def test_advance_clamps_at_final(app, make_team, make_user, make_cycle, make_application):
    application = make_application(make_user(), make_team(), make_cycle(Stage.FINAL),
                                   internal_status=Stage.FINAL)
    assert stages.advance(application.id) == Stage.FINAL
    assert application.internal_status == Stage.FINAL


def test_override_may_move_backwards(app, make_team, make_user, make_cycle, make_application):
    application = make_application(make_user(), make_team(), make_cycle(), internal_status=Stage.TRAIL)
    stages.override_internal_status(application.id, Stage.APPLICATION)
    assert application.internal_status == Stage.APPLICATION


def test_set_decision_rejects_non_decisions(app, make_team, make_user, make_cycle, make_application):
    application = make_application(make_user(), make_team(), make_cycle())
    stages.set_decision(application.id, ApplicationStatus.ACCEPTED)
    assert application.internal_decision == ApplicationStatus.ACCEPTED
    with pytest.raises(ValidationError):
        stages.set_decision(application.id, ApplicationStatus.DRAFT)


def test_create_cycle_builds_equal_windows(app):
    start = datetime(2030, 3, 1)
    cycle = stages.create_cycle("Autumn", start, start + timedelta(days=50))
    windows = stages.stages_of(cycle.id)
    assert [w.stage for w in windows] == list(Stage)
    assert all(w.end_date - w.start_date == timedelta(days=10) for w in windows)
    assert cycle.stage == Stage.PREPARATION


def test_update_stage_window_extends_cycle(app):
    start = datetime(2030, 3, 1)
    cycle = stages.create_cycle("Autumn", start, start + timedelta(days=50))
    final = stages.stages_of(cycle.id)[-1]
    stages.update_stage_window(final.id, final.start_date, start + timedelta(days=70))
    assert cycle.end_date == start + timedelta(days=70)

    with pytest.raises(ValidationError):
        stages.update_stage_window(final.id, start - timedelta(days=1), final.end_date)


def test_sweep_into_interview_cascades(app, monkeypatch, make_team, make_user, make_cycle, make_application):
    sent = []
    monkeypatch.setattr('portal.jobs.notify.send_batch',
                        lambda messages: sent.extend(messages) or [(True, "id")] * len(messages))
    team = make_team()
    cycle = make_cycle(Stage.APPLICATION)
    plain = make_application(make_user(), team, cycle)
    pending = make_application(make_user(), team, cycle, data={"reviews": {"Backend": "pending"}})

    result = stages.sweep(now=NOW)

    assert result.ok
    assert cycle.stage == Stage.INTERVIEW
    assert plain.status == ApplicationStatus.REJECTED
    assert pending.status == ApplicationStatus.NEEDS_REVIEW
    assert result.transitions == [{"cycle_id": cycle.id, "stage": "INTERVIEW", "updated": 2}]
    assert len(sent) == 2
    assert Notification.query.filter_by(status="sent").count() == 2


def test_sweep_keeps_staff_decisions(app, monkeypatch, make_team, make_user, make_cycle, make_application):
    sent = []
    monkeypatch.setattr('portal.jobs.notify.send_batch',
                        lambda messages: sent.extend(messages) or [(True, "id")] * len(messages))
    team = make_team()
    cycle = make_cycle(Stage.APPLICATION)
    accepted = make_application(make_user(), team, cycle)
    waitlisted = make_application(make_user(), team, cycle, status=ApplicationStatus.WAITLISTED)
    plain = make_application(make_user(), team, cycle)
    stages.set_decision(accepted.id, ApplicationStatus.ACCEPTED)
    stages.set_decision(waitlisted.id, ApplicationStatus.WAITLISTED)

    result = stages.sweep(now=NOW)

    assert accepted.status == ApplicationStatus.ACCEPTED
    assert waitlisted.status == ApplicationStatus.WAITLISTED
    assert plain.status == ApplicationStatus.REJECTED
    # only applications whose status changed are told about it
    assert result.transitions == [{"cycle_id": cycle.id, "stage": "INTERVIEW", "updated": 2}]
    assert sorted(m["application_id"] for m in sent) == sorted([accepted.id, plain.id])


def test_sweep_is_idempotent(app, monkeypatch, make_team, make_user, make_cycle, make_application):
    monkeypatch.setattr('portal.jobs.notify.send_batch', lambda messages: [(True, "id")] * len(messages))
    cycle = make_cycle(Stage.APPLICATION)
    make_application(make_user(), make_team(), cycle)
    stages.sweep(now=NOW)
    again = stages.sweep(now=NOW)
    assert again.transitions == []
    assert again.cycles == 1


def test_sweep_ignores_inactive_cycles(app, make_cycle):
    cycle = make_cycle(Stage.PREPARATION, start=datetime(2031, 1, 1))
    result = stages.sweep(now=NOW)
    assert result.cycles == 0
    assert cycle.stage == Stage.PREPARATION


def test_sweep_keeps_going_after_a_failed_cycle(app, monkeypatch, make_cycle):
    bad = make_cycle(Stage.APPLICATION)
    good = make_cycle(Stage.APPLICATION)
    real_sweep_cycle = stages._sweep_cycle

    def flaky(cycle, now):
        if cycle.id == bad.id:
            raise RuntimeError("boom")
        return real_sweep_cycle(cycle, now)

    monkeypatch.setattr(stages, "_sweep_cycle", flaky)
    result = stages.sweep(now=NOW)

    assert result.failed == [bad.id]
    assert not result.ok
    assert db.session.get(type(good), good.id).stage == Stage.INTERVIEW


def test_stage_notifications_are_chunked(app, monkeypatch, make_team, make_user, make_cycle, make_application):
    from portal.jobs.notify import notify_stage_update

    app.config["NOTIFY_BATCH_SIZE"] = 2
    chunks = []

    def fake_batch(messages):
        chunks.append(len(messages))
        if len(chunks) == 1:
            raise RuntimeError("rate limited")
        return [(True, "id")] * len(messages)

    monkeypatch.setattr('portal.jobs.notify.send_batch', fake_batch)
    team = make_team()
    cycle = make_cycle()
    ids = [make_application(make_user(), team, cycle).id for _ in range(5)]

    out = notify_stage_update(cycle.id, "INTERVIEW", ids)

    assert chunks == [2, 2, 1]
    assert out == {"sent": 3, "failed": 2, "skipped": 0}

    # already-sent messages are not repeated
    chunks.clear()
    out = notify_stage_update(cycle.id, "INTERVIEW", ids)
    assert out["skipped"] == 3
    assert chunks == [2]


def test_stage_notifications_without_mail_config_are_skipped(app, make_team, make_user, make_cycle,
                                                             make_application):
    from portal.jobs.notify import notify_stage_update

    team = make_team()
    cycle = make_cycle()
    ids = [make_application(make_user(), team, cycle).id for _ in range(3)]

    out = notify_stage_update(cycle.id, "INTERVIEW", ids)

    assert out == {"sent": 0, "failed": 0, "skipped": 3}
    assert Notification.query.filter_by(kind="stage_update", status="skipped").count() == 3
    assert Notification.query.filter_by(status="failed").count() == 0
