from flask import jsonify, request
from flask_login import current_user, login_required

from . import bp
from .forms import InboxFilterForm, MessageForm, MessageUpdateForm
from ...services import messages
from ...utils.forms import load, submitted


@bp.get("")
@login_required
def inbox():
    form = load(InboxFilterForm, source=request.args.to_dict())
    return jsonify([m.to_dict() for m in messages.inbox(current_user, unread_only=form.unread.data)])


@bp.post("")
@login_required
def send():
    form = load(MessageForm)
    message = messages.send_message(current_user, form.user_id.data, form.text.data)
    return jsonify(message.to_dict()), 201


@bp.get("/users/<int:user_id>")
@login_required
def for_user(user_id):
    return jsonify([m.to_dict() for m in messages.messages_for_user(current_user, user_id)])


@bp.get("/<int:message_id>")
@login_required
def detail(message_id):
    return jsonify(messages.get_message(current_user, message_id).to_dict())


@bp.patch("/<int:message_id>")
@login_required
def update(message_id):
    form = load(MessageUpdateForm)
    # a bare PATCH marks the message read
    message = messages.mark_read(current_user, message_id, **submitted(form))
    return jsonify(message.to_dict())


@bp.delete("/<int:message_id>")
@login_required
def delete(message_id):
    messages.delete_message(current_user, message_id)
    return "", 204
