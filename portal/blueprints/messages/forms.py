from flask_wtf import FlaskForm
from wtforms import BooleanField, IntegerField, TextAreaField
from wtforms.validators import DataRequired, InputRequired


class MessageForm(FlaskForm):
    user_id = IntegerField("Recipient", validators=[InputRequired()])
    text = TextAreaField("Text", validators=[DataRequired()])


class MessageUpdateForm(FlaskForm):
    is_read = BooleanField("Read")


class InboxFilterForm(FlaskForm):
    unread = BooleanField("Unread only")
