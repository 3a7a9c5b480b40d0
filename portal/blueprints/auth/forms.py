from flask_wtf import FlaskForm
from wtforms import IntegerField, PasswordField, SelectField, StringField
from wtforms.validators import DataRequired, Email, Length, Optional

from ...models.enums import Role

ROLE_CHOICES = [(r.value, r.value) for r in Role]


class LoginForm(FlaskForm):
    email = StringField("Email", validators=[DataRequired(), Email()])
    password = PasswordField("Password", validators=[DataRequired()])


class UserUpdateForm(FlaskForm):
    role = SelectField("Role", choices=ROLE_CHOICES, validators=[Optional()], validate_choice=False)
    team_id = IntegerField("Team", validators=[Optional()])
    system_id = IntegerField("System", validators=[Optional()])


class ProfileForm(FlaskForm):
    name = StringField("Name", validators=[Optional(), Length(max=255)])
    password = PasswordField("Password", validators=[Optional(), Length(min=8)])


class SignupForm(FlaskForm):
    email = StringField("Email", validators=[DataRequired(), Email()])
    name = StringField("Name", validators=[Optional(), Length(max=255)])
    password = PasswordField("Password", validators=[DataRequired(), Length(min=8)])
