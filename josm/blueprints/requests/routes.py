from flask import jsonify, request
from flask_login import current_user

from josm.blueprints import payload
from josm.permissions import has_permission, perm_required
from josm.services import requests as material_requests
from . import requests_bp


@requests_bp.get("")
@perm_required("request_materials", "approve_requests")
def requests_list():
    status = (request.args.get("status") or "").strip().lower() or None
    requested_by = None
    # shop floor only sees its own requests
    if not has_permission(current_user, "approve_requests"):
        requested_by = current_user.id
    reqs = material_requests.list_requests(status=status, requested_by=requested_by)
    return jsonify([r.to_dict() for r in reqs])


@requests_bp.post("")
@perm_required("request_materials")
def request_create():
    data = payload()
    req = material_requests.create_request(
        data.get("material_id"),
        data.get("quantity"),
        data.get("job_card_number"),
        current_user,
        notes=data.get("notes"),
    )
    return jsonify(req.to_dict()), 201


@requests_bp.get("/<int:request_id>")
@perm_required("request_materials", "approve_requests")
def request_detail(request_id):
    req = material_requests.get_request(request_id)
    if not has_permission(current_user, "approve_requests") and req.requested_by != current_user.id:
        return jsonify({"error": "forbidden", "message": "not your request"}), 403
    return jsonify(req.to_dict())


@requests_bp.post("/<int:request_id>/approve")
@perm_required("approve_requests")
def request_approve(request_id):
    req = material_requests.approve_request(request_id, current_user, payload().get("notes"))
    return jsonify({"request": req.to_dict(), "message": "Request approved and stock deducted."})


@requests_bp.post("/<int:request_id>/reject")
@perm_required("approve_requests")
def request_reject(request_id):
    req = material_requests.reject_request(request_id, current_user, payload().get("notes"))
    return jsonify({"request": req.to_dict(), "message": "Request rejected."})
