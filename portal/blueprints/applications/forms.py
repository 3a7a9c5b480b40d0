from flask_wtf import FlaskForm
from wtforms import BooleanField, IntegerField, SelectField
from wtforms.validators import InputRequired, Optional

from ...models.enums import ApplicationStatus, Stage


class ApplicationForm(FlaskForm):
    team_id = IntegerField("Team", validators=[InputRequired()])
    system_id = IntegerField("System", validators=[Optional()])


class DraftForm(FlaskForm):
    submit = BooleanField("Submit")


class ReviewForm(FlaskForm):
    status = SelectField("Status", choices=[(s.value, s.value) for s in ApplicationStatus],
                         validators=[Optional()], validate_choice=False)
    decision = SelectField("Decision", choices=[(s.value, s.value) for s in ApplicationStatus],
                           validators=[Optional()], validate_choice=False)


class StageOverrideForm(FlaskForm):
    stage = SelectField("Stage", choices=[(s.value, s.value) for s in Stage], validators=[InputRequired()])


class ApplicationFilterForm(FlaskForm):
    cycle_id = IntegerField("Cycle", validators=[Optional()])
    team_id = IntegerField("Team", validators=[Optional()])
    system_id = IntegerField("System", validators=[Optional()])
    user_id = IntegerField("User", validators=[Optional()])
