from flask import jsonify, request
from flask_login import current_user

from josm.blueprints import payload
from josm.permissions import perm_required
from josm.services import customer_goods
from . import customer_goods_bp


@customer_goods_bp.get("")
@perm_required("view_customer_goods")
def goods_list():
    status = (request.args.get("status") or "").strip().lower() or None
    return jsonify([g.to_dict() for g in customer_goods.list_goods(status)])


@customer_goods_bp.post("")
@perm_required("manage_customer_goods")
def goods_create():
    return jsonify(customer_goods.create_goods(payload(), current_user).to_dict()), 201


@customer_goods_bp.get("/<int:goods_id>")
@perm_required("view_customer_goods")
def goods_detail(goods_id):
    return jsonify(customer_goods.get_goods(goods_id).to_dict())


@customer_goods_bp.patch("/<int:goods_id>")
@perm_required("manage_customer_goods")
def goods_update(goods_id):
    return jsonify(customer_goods.update_goods(goods_id, payload()).to_dict())


@customer_goods_bp.delete("/<int:goods_id>")
@perm_required("manage_customer_goods")
def goods_delete(goods_id):
    customer_goods.delete_goods(goods_id)
    return jsonify({"message": "Customer goods deleted."})
