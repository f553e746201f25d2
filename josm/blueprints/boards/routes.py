from flask import jsonify
from flask_login import current_user

from josm.blueprints import payload
from josm.permissions import perm_required
from josm.services import boards
from . import boards_bp


@boards_bp.get("")
@perm_required("view_finished_boards")
def boards_list():
    return jsonify([b.to_dict() for b in boards.list_boards()])


@boards_bp.get("/low-stock")
@perm_required("view_finished_boards")
def boards_low_stock():
    return jsonify([b.to_dict() for b in boards.low_stock_boards()])


@boards_bp.post("")
@perm_required("manage_finished_boards")
def board_create():
    return jsonify(boards.create_board(payload(), actor=current_user).to_dict()), 201


@boards_bp.get("/<int:board_id>")
@perm_required("view_finished_boards")
def board_detail(board_id):
    return jsonify(boards.get_board(board_id).to_dict())


@boards_bp.patch("/<int:board_id>")
@perm_required("manage_finished_boards")
def board_update(board_id):
    return jsonify(boards.update_board(board_id, payload()).to_dict())


@boards_bp.delete("/<int:board_id>")
@perm_required("manage_finished_boards")
def board_delete(board_id):
    boards.delete_board(board_id)
    return jsonify({"message": "Board deleted."})


@boards_bp.post("/<int:board_id>/manufacture")
@perm_required("manage_finished_boards")
def board_manufacture(board_id):
    data = payload()
    board = boards.manufacture_board(board_id, data.get("quantity"), current_user, data.get("notes"))
    return jsonify(board.to_dict())


@boards_bp.post("/<int:board_id>/sell")
@perm_required("manage_finished_boards")
def board_sell(board_id):
    data = payload()
    board = boards.sell_board(board_id, data.get("quantity"), data.get("customer_name"), current_user)
    return jsonify(board.to_dict())


@boards_bp.get("/<int:board_id>/transactions")
@perm_required("view_finished_boards")
def board_transactions(board_id):
    boards.get_board(board_id)
    return jsonify([t.to_dict() for t in boards.list_transactions(board_id)])
