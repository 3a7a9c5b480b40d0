from flask_wtf import FlaskForm
from wtforms import DateField, DateTimeField, IntegerField, SelectField, TextAreaField
from wtforms.validators import DataRequired, InputRequired, Optional

from ..cycles.forms import DATETIME_FORMATS
from ...models.enums import InterviewStatus


class SlotQueryForm(FlaskForm):
    system_id = IntegerField("System", validators=[InputRequired()])
    date = DateField("Date", format="%Y-%m-%d", validators=[InputRequired()])


class BookingForm(FlaskForm):
    application_id = IntegerField("Application", validators=[InputRequired()])
    system_id = IntegerField("System", validators=[InputRequired()])
    start = DateTimeField("Start", format=DATETIME_FORMATS, validators=[InputRequired()])


class InterviewUpdateForm(FlaskForm):
    status = SelectField("Status", choices=[(s.value, s.value) for s in InterviewStatus],
                         validators=[Optional()], validate_choice=False)
    notes = TextAreaField("Notes", validators=[Optional()])


class NoteForm(FlaskForm):
    note = TextAreaField("Note", validators=[DataRequired()])


class InterviewFilterForm(FlaskForm):
    system_id = IntegerField("System", validators=[Optional()])
    application_id = IntegerField("Application", validators=[Optional()])
