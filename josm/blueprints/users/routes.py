from flask import current_app, jsonify

from josm.blueprints import payload
from josm.permissions import perm_required
from josm.services import users
from . import users_bp


@users_bp.get("")
@perm_required("manage_users")
def users_list():
    return jsonify([u.to_dict() for u in users.list_users()])


@users_bp.post("")
@perm_required("manage_users")
def user_create():
    u = users.create_user(payload())
    return jsonify(u.to_dict()), 201


@users_bp.get("/<int:user_id>")
@perm_required("manage_users")
def user_detail(user_id):
    return jsonify(users.get_user(user_id).to_dict())


@users_bp.patch("/<int:user_id>")
@perm_required("manage_users")
def user_update(user_id):
    return jsonify(users.update_user(user_id, payload()).to_dict())


@users_bp.post("/<int:user_id>/reset-password")
@perm_required("manage_users")
def user_reset_password(user_id):
    password = payload().get("password") or current_app.config["DEFAULT_PASSWORD"]
    u = users.reset_password(user_id, password)
    return jsonify({"user": u.to_dict(), "message": f"Password for {u.email} was reset."})


@users_bp.post("/<int:user_id>/activate")
@perm_required("manage_users")
def user_activate(user_id):
    return jsonify(users.set_active(user_id, True).to_dict())


@users_bp.post("/<int:user_id>/deactivate")
@perm_required("manage_users")
def user_deactivate(user_id):
    return jsonify(users.set_active(user_id, False).to_dict())
