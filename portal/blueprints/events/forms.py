from flask_wtf import FlaskForm
from wtforms import DateTimeField, IntegerField, StringField, TextAreaField
from wtforms.validators import DataRequired, InputRequired, Optional

from ..cycles.forms import DATETIME_FORMATS


class EventForm(FlaskForm):
    name = StringField("Name", validators=[DataRequired()])
    description = TextAreaField("Description", validators=[Optional()])
    start_time = DateTimeField("Start", format=DATETIME_FORMATS, validators=[InputRequired()])
    end_time = DateTimeField("End", format=DATETIME_FORMATS, validators=[InputRequired()])
    location = StringField("Location", validators=[Optional()])


class EventUpdateForm(FlaskForm):
    name = StringField("Name", validators=[Optional()])
    description = TextAreaField("Description", validators=[Optional()])
    start_time = DateTimeField("Start", format=DATETIME_FORMATS, validators=[Optional()])
    end_time = DateTimeField("End", format=DATETIME_FORMATS, validators=[Optional()])
    location = StringField("Location", validators=[Optional()])


class AttendeeForm(FlaskForm):
    user_id = IntegerField("User", validators=[InputRequired()])
