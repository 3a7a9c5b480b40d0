from flask_wtf import FlaskForm
from wtforms import DateTimeField, SelectField, StringField
from wtforms.validators import DataRequired, InputRequired, Length

from ...models.enums import Stage

DATETIME_FORMATS = ["%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M"]
STAGE_CHOICES = [(s.value, s.value) for s in Stage]


class CycleForm(FlaskForm):
    name = StringField("Name", validators=[DataRequired(), Length(max=255)])
    start_date = DateTimeField("Start", format=DATETIME_FORMATS, validators=[InputRequired()])
    end_date = DateTimeField("End", format=DATETIME_FORMATS, validators=[InputRequired()])


class StageWindowForm(FlaskForm):
    start_date = DateTimeField("Start", format=DATETIME_FORMATS, validators=[InputRequired()])
    end_date = DateTimeField("End", format=DATETIME_FORMATS, validators=[InputRequired()])


class StageForm(FlaskForm):
    stage = SelectField("Stage", choices=STAGE_CHOICES, validators=[InputRequired()])
