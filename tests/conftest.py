import os
import sys
from datetime import datetime, timedelta

import pytest
from flask import g
from flask_login import FlaskLoginClient

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from portal import create_app
from portal.extensions import db
from portal.models import (Application, ApplicationCycle, ApplicationStatus, CycleStage, Role, Stage,
                           System, Team, User)


class LoginClient(FlaskLoginClient):
    """Requests share the fixture's app context, so drop the user Flask-Login
    cached in ``g`` and let each request load its own from the session."""

    def open(self, *args, **kwargs):
        g.pop("_login_user", None)
        return super().open(*args, **kwargs)


@pytest.fixture
def app():
    app = create_app('config.TestConfig')
    app.test_client_class = LoginClient
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def make_team(app):
    def _make(name="Software", multi=False):
        team = Team(name=name, allows_multiple_system_interviews=multi)
        db.session.add(team)
        db.session.commit()
        return team
    return _make


@pytest.fixture
def make_system(app):
    def _make(team, name="Backend"):
        system = System(name=name, team_id=team.id)
        db.session.add(system)
        db.session.commit()
        return system
    return _make


@pytest.fixture
def make_user(app):
    counter = {"n": 0}

    def _make(role=Role.APPLICANT, team=None, system=None, email=None, password="password123"):
        counter["n"] += 1
        user = User(email=email or f"user{counter['n']}@example.com", name=f"User {counter['n']}",
                    role=role, team_id=team.id if team else None, system_id=system.id if system else None)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user
    return _make


@pytest.fixture
def make_cycle(app):
    """A cycle spanning ``start``..``start + 50 days`` with one 10-day window per stage."""
    def _make(stage=Stage.INTERVIEW, start=None):
        start = start or datetime(2030, 1, 1)
        cycle = ApplicationCycle(name="Spring", stage=stage, start_date=start,
                                 end_date=start + timedelta(days=50))
        db.session.add(cycle)
        db.session.flush()
        for i, s in enumerate(Stage):
            db.session.add(CycleStage(cycle_id=cycle.id, stage=s,
                                      start_date=start + timedelta(days=10 * i),
                                      end_date=start + timedelta(days=10 * (i + 1)) - timedelta(seconds=1)))
        db.session.commit()
        return cycle
    return _make


@pytest.fixture
def make_application(app):
    def _make(user, team, cycle, system=None, internal_status=Stage.INTERVIEW,
              status=ApplicationStatus.SUBMITTED, data=None):
        application = Application(user_id=user.id, team_id=team.id, system_id=system.id if system else None,
                                  application_cycle_id=cycle.id, status=status,
                                  internal_status=internal_status, data=data or {})
        db.session.add(application)
        db.session.commit()
        return application
    return _make
