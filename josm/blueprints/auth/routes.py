from flask import jsonify
from flask_login import current_user, login_required, login_user, logout_user

from josm.blueprints import payload
from josm.permissions import ROLE_PERMS
from josm.services import users
from . import auth_bp


@auth_bp.post("/login")
def login():
    data = payload()
    u = users.authenticate(data.get("email"), data.get("password"))
    if not u:
        return jsonify({"error": "invalid_login", "message": "Invalid email or password."}), 401

    login_user(u)
    return jsonify({"user": u.to_dict(), "message": f"Welcome, {u.name}."})


@auth_bp.post("/logout")
@login_required
def logout():
    logout_user()
    return jsonify({"message": "Logged out."})


@auth_bp.get("/me")
@login_required
def me():
    data = current_user.to_dict()
    data["permissions"] = ROLE_PERMS.get(current_user.role, [])
    return jsonify(data)
