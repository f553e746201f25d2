from flask import jsonify, request
from flask_login import current_user

from josm.blueprints import payload
from josm.permissions import perm_required
from josm.services import tools
from . import tools_bp


@tools_bp.get("")
@perm_required("view_tools")
def tools_list():
    q = (request.args.get("q") or "").strip()
    status = (request.args.get("status") or "").strip() or None
    return jsonify([t.to_dict() for t in tools.list_tools(q, status)])


@tools_bp.post("")
@perm_required("manage_tools")
def tool_create():
    return jsonify(tools.create_tool(payload()).to_dict()), 201


@tools_bp.get("/<int:tool_id>")
@perm_required("view_tools")
def tool_detail(tool_id):
    return jsonify(tools.get_tool(tool_id).to_dict())


@tools_bp.patch("/<int:tool_id>")
@perm_required("manage_tools")
def tool_update(tool_id):
    return jsonify(tools.update_tool(tool_id, payload()).to_dict())


@tools_bp.delete("/<int:tool_id>")
@perm_required("manage_tools")
def tool_delete(tool_id):
    tools.delete_tool(tool_id)
    return jsonify({"message": "Tool deleted."})


@tools_bp.post("/<int:tool_id>/checkout")
@perm_required("manage_tools", "checkout_tools")
def tool_checkout(tool_id):
    worker_name = payload().get("worker_name") or current_user.name
    return jsonify(tools.checkout_tool(tool_id, worker_name, current_user).to_dict())


@tools_bp.post("/<int:tool_id>/return")
@perm_required("manage_tools", "checkout_tools")
def tool_return(tool_id):
    return jsonify(tools.return_tool(tool_id, current_user, payload().get("notes")).to_dict())


@tools_bp.post("/<int:tool_id>/damage")
@perm_required("manage_tools")
def tool_damage(tool_id):
    return jsonify(tools.mark_damaged(tool_id, current_user, payload().get("notes")).to_dict())


@tools_bp.get("/transactions")
@perm_required("view_tools")
def tools_transactions():
    tool_id = request.args.get("tool_id", type=int)
    return jsonify([t.to_dict() for t in tools.list_transactions(tool_id)])
