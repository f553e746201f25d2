from functools import wraps

from flask import jsonify
from flask_login import current_user


ROLE_PERMS = {

    "admin": ["all"],

    "store_keeper": [
        "view_materials",
        "manage_materials",
        "view_tools",
        "manage_tools",
        "approve_requests",
        "view_job_cards",
        "manage_job_cards",
        "view_reports",
    ],

    "supervisor": [
        "view_materials",
        "view_tools",
        "request_materials",
        "view_job_cards",
        "manage_job_cards",
        "update_fabrication",
        "update_assembling",
    ],

    "worker": [
        "view_materials",
        "view_tools",
        "request_materials",
        "checkout_tools",
        "view_own_requests",
        "view_job_cards",
        "update_fabrication",
        "update_assembling",
    ],

    "sales_warehouse": [
        "view_finished_boards",
        "manage_finished_boards",
        "view_customer_goods",
        "manage_customer_goods",
    ],
}


def has_permission(user, perm: str) -> bool:
    if user is None or not getattr(user, "is_authenticated", False):
        return False
    perms = ROLE_PERMS.get(user.role, [])
    return "all" in perms or perm in perms


def _unauthenticated():
    return jsonify({"error": "unauthorized", "message": "login required"}), 401


def _forbidden():
    return jsonify({"error": "forbidden", "message": "you do not have permission for this action"}), 403


# -------------------------------
# permission check (ROLE_PERMS)
# -------------------------------
def perm_required(*perm_names):
    """Allow the call when the user holds any of ``perm_names``."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not current_user.is_authenticated:
                return _unauthenticated()
            if not any(has_permission(current_user, p) for p in perm_names):
                return _forbidden()
            return fn(*args, **kwargs)
        return wrapper
    return decorator
