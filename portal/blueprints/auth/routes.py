from flask import current_app, jsonify
from flask_login import current_user, login_required, login_user, logout_user

from . import bp
from .forms import LoginForm, ProfileForm, SignupForm, UserUpdateForm
from ...errors import AuthenticationError, StateError
from ...extensions import db
from ...models.user import User
from ...services import people
from ...utils.forms import load, submitted


@bp.post("/login")
def login():
    form = load(LoginForm)
    user = User.query.filter_by(email=form.email.data.strip().lower()).first()
    if not user or not user.check_password(form.password.data):
        current_app.logger.info("Failed login for %s", form.email.data)
        raise AuthenticationError("Invalid email or password.")
    login_user(user)
    return jsonify(user.to_dict())


@bp.post("/signup")
def signup():
    """Self-service accounts are always applicants; staff roles are granted afterwards."""
    form = load(SignupForm)
    email = form.email.data.strip().lower()
    if User.query.filter_by(email=email).first():
        raise StateError("An account with this email already exists.")
    user = User(email=email, name=form.name.data)
    user.set_password(form.password.data)
    db.session.add(user)
    db.session.commit()
    login_user(user)
    return jsonify(user.to_dict()), 201


@bp.post("/logout")
@login_required
def logout():
    logout_user()
    return jsonify({"ok": True})


@bp.get("/me")
@login_required
def me():
    return jsonify(current_user.to_dict())


@bp.patch("/me")
@login_required
def update_me():
    form = load(ProfileForm)
    user = people.update_profile(current_user, **submitted(form))
    return jsonify(user.to_dict())


@bp.get("/users")
@login_required
def users_index():
    return jsonify([u.to_dict() for u in people.list_people(current_user)])


@bp.patch("/users/<int:user_id>")
@login_required
def update_user(user_id):
    form = load(UserUpdateForm)
    user = people.update_user(current_user, user_id, **submitted(form))
    return jsonify(user.to_dict())
