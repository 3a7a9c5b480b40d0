"""In-app inbox: staff send short messages, recipients read and clear their own."""
from ..extensions import db
from ..errors import NotFoundError, ValidationError
from ..models.message import Message
from ..models.user import User
from .access import can, require, require_actor
from .policy import Action


def _get_message(actor, message_id, action):
    message = db.session.get(Message, message_id)
    if message is None:
        raise NotFoundError(f"Message {message_id} not found.")
    require(can(actor, "message", action, owner_id=message.user_id), "This message is not yours.")
    return message


def send_message(actor, user_id, text):
    require_actor(actor)
    require(can(actor, "message", Action.CREATE), "Only staff can send messages.")
    if not text or not text.strip():
        raise ValidationError("Message text is required.")
    if db.session.get(User, user_id) is None:
        raise NotFoundError(f"User {user_id} not found.")
    message = Message(user_id=user_id, sender_id=actor.id, text=text.strip(), is_read=False)
    db.session.add(message)
    db.session.commit()
    return message


def inbox(actor, unread_only=False):
    require_actor(actor)
    q = Message.query.filter_by(user_id=actor.id)
    if unread_only:
        q = q.filter_by(is_read=False)
    return q.order_by(Message.created_at.desc(), Message.id.desc()).all()


def messages_for_user(actor, user_id):
    require_actor(actor)
    require(can(actor, "message", Action.READ, owner_id=user_id), "You cannot read this inbox.")
    return (Message.query.filter_by(user_id=user_id)
            .order_by(Message.created_at.desc(), Message.id.desc()).all())


def get_message(actor, message_id):
    require_actor(actor)
    return _get_message(actor, message_id, Action.READ)


def mark_read(actor, message_id, is_read=True):
    require_actor(actor)
    message = _get_message(actor, message_id, Action.UPDATE)
    message.is_read = bool(is_read)
    db.session.commit()
    return message


def delete_message(actor, message_id):
    require_actor(actor)
    message = _get_message(actor, message_id, Action.DELETE)
    db.session.delete(message)
    db.session.commit()
