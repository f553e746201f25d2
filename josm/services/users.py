import logging

from josm.errors import DuplicateEntry, NotFound, ValidationError
from josm.extensions import db
from josm.models import User
from josm.models.user import ROLES
from josm.utils import clean, require

logger = logging.getLogger(__name__)


def list_users():
    return User.query.order_by(User.name.asc()).all()


def get_user(user_id) -> User:
    user = db.session.get(User, user_id)
    if not user:
        raise NotFound("User", user_id)
    return user


def authenticate(email, password):
    email = (clean(email) or "").lower()
    user = User.query.filter_by(email=email, active=True).first()
    if not user or not user.check_password(password or ""):
        return None
    return user


def create_user(data) -> User:
    name, email, password = require(data, "name", "email", "password")
    email = email.lower()
    role = clean(data.get("role")) or "worker"
    _check_role(role)

    if User.query.filter_by(email=email).first():
        raise DuplicateEntry(f"User {email} already exists")

    user = User(name=name, email=email, role=role, active=True)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    logger.info("user %s created with role %s", email, role)
    return user


def update_user(user_id, data) -> User:
    user = get_user(user_id)
    if clean(data.get("name")):
        user.name = clean(data.get("name"))
    if clean(data.get("email")):
        email = clean(data.get("email")).lower()
        if User.query.filter(User.email == email, User.id != user.id).first():
            raise DuplicateEntry(f"User {email} already exists")
        user.email = email
    if clean(data.get("role")):
        role = clean(data.get("role"))
        _check_role(role)
        user.role = role
    db.session.commit()
    return user


def reset_password(user_id, password) -> User:
    user = get_user(user_id)
    user.set_password(password)
    db.session.commit()
    logger.info("password reset for %s", user.email)
    return user


def set_active(user_id, active: bool) -> User:
    user = get_user(user_id)
    user.active = active
    db.session.commit()
    return user


def _check_role(role):
    if role not in ROLES:
        raise ValidationError(f"role must be one of {', '.join(ROLES)}")
