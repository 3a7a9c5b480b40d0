from flask_wtf import FlaskForm
from wtforms import BooleanField, IntegerField, StringField, TextAreaField
from wtforms.validators import DataRequired, InputRequired, Length, Optional


class TeamForm(FlaskForm):
    name = StringField("Name", validators=[DataRequired(), Length(max=256)])
    description = TextAreaField("Description", validators=[Optional()])
    allows_multiple_system_interviews = BooleanField("Multiple system interviews")


class TeamUpdateForm(FlaskForm):
    name = StringField("Name", validators=[Optional(), Length(max=256)])
    description = TextAreaField("Description", validators=[Optional()])
    allows_multiple_system_interviews = BooleanField("Multiple system interviews")


class SystemForm(FlaskForm):
    team_id = IntegerField("Team", validators=[InputRequired()])
    name = StringField("Name", validators=[DataRequired(), Length(max=256)])
    description = TextAreaField("Description", validators=[Optional()])


class SystemUpdateForm(FlaskForm):
    name = StringField("Name", validators=[Optional(), Length(max=256)])
    description = TextAreaField("Description", validators=[Optional()])
