from flask import jsonify, request
from flask_login import current_user

from josm.blueprints import payload
from josm.permissions import perm_required
from josm.services import materials
from . import materials_bp


@materials_bp.get("")
@perm_required("view_materials")
def materials_list():
    q = (request.args.get("q") or "").strip()
    return jsonify([m.to_dict() for m in materials.list_materials(q)])


@materials_bp.get("/low-stock")
@perm_required("view_materials")
def materials_low_stock():
    return jsonify([m.to_dict() for m in materials.low_stock_materials()])


@materials_bp.post("")
@perm_required("manage_materials")
def material_create():
    mat = materials.create_material(payload(), actor=current_user)
    return jsonify(mat.to_dict()), 201


@materials_bp.get("/<int:material_id>")
@perm_required("view_materials")
def material_detail(material_id):
    return jsonify(materials.get_material(material_id).to_dict())


@materials_bp.patch("/<int:material_id>")
@perm_required("manage_materials")
def material_update(material_id):
    return jsonify(materials.update_material(material_id, payload()).to_dict())


@materials_bp.post("/<int:material_id>/receive")
@perm_required("manage_materials")
def material_receive(material_id):
    data = payload()
    mat = materials.receive_material(material_id, data.get("quantity"), current_user, data.get("notes"))
    return jsonify(mat.to_dict())


@materials_bp.post("/<int:material_id>/issue")
@perm_required("manage_materials")
def material_issue(material_id):
    data = payload()
    mat = materials.issue_material(
        material_id,
        data.get("quantity"),
        current_user,
        job_card_number=data.get("job_card_number"),
        recipient_name=data.get("recipient_name"),
        notes=data.get("notes"),
    )
    return jsonify(mat.to_dict())


@materials_bp.post("/<int:material_id>/return")
@perm_required("manage_materials")
def material_return(material_id):
    data = payload()
    mat = materials.return_material(material_id, data.get("quantity"), current_user, data.get("notes"))
    return jsonify(mat.to_dict())


@materials_bp.get("/<int:material_id>/transactions")
@perm_required("view_materials")
def material_transactions(material_id):
    materials.get_material(material_id)
    return jsonify([t.to_dict() for t in materials.list_transactions(material_id)])
