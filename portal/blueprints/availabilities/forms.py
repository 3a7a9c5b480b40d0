from flask_wtf import FlaskForm
from wtforms import DateTimeField, IntegerField
from wtforms.validators import InputRequired, Optional

from ..cycles.forms import DATETIME_FORMATS


class AvailabilityForm(FlaskForm):
    system_id = IntegerField("System", validators=[InputRequired()])
    start = DateTimeField("Start", format=DATETIME_FORMATS, validators=[InputRequired()])
    end = DateTimeField("End", format=DATETIME_FORMATS, validators=[InputRequired()])


class AvailabilityUpdateForm(FlaskForm):
    start = DateTimeField("Start", format=DATETIME_FORMATS, validators=[Optional()])
    end = DateTimeField("End", format=DATETIME_FORMATS, validators=[Optional()])
