import pytest

from josm.errors import DuplicateEntry, IllegalTransition, InsufficientStock, ValidationError, ValidationMissingField
from josm.models import BoardTransaction, ToolTransaction
from josm.services import boards, customer_goods, tools


# ------------------------- finished boards -------------------------
def test_create_board_defaults_threshold_by_type(ctx):
    assert boards.create_board({"type": "Surface Mounted", "color": "White"}).min_threshold == 5
    assert boards.create_board({"type": "Mini-Flush", "color": "White"}).min_threshold == 2
    assert boards.create_board({"type": "Enclosure", "color": "Grey", "min_threshold": 9}).min_threshold == 9


def test_duplicate_board_ignores_color_case(ctx):
    boards.create_board({"type": "Enclosure", "color": "Grey"})
    with pytest.raises(DuplicateEntry):
        boards.create_board({"type": "Enclosure", "color": "grey"})


def test_negative_board_threshold_rejected(ctx):
    board = boards.create_board({"type": "Mini-Flush", "color": "Red"})
    with pytest.raises(ValidationError):
        boards.update_board(board.id, {"min_threshold": -2, "color": "Blue"})
    assert board.min_threshold == 2
    assert board.color == "Red"


def test_manufacture_and_sell(user):
    sales = user("sales_warehouse")
    board = boards.create_board({"type": "Mini-Flush", "color": "Red", "quantity": 2}, actor=sales)

    boards.manufacture_board(board.id, 3, sales)
    boards.sell_board(board.id, 4, "Kamau Hardware", sales)

    assert board.quantity == 1
    kinds = [t.transaction_type for t in boards.list_transactions(board.id)]
    assert sorted(kinds) == ["manufactured", "manufactured", "sold"]

    sale = BoardTransaction.query.filter_by(transaction_type="sold").one()
    assert sale.customer_name == "Kamau Hardware"
    assert sale.notes == "Sold to Kamau Hardware"


def test_sell_more_than_stock(user):
    sales = user("sales_warehouse")
    board = boards.create_board({"type": "Mini-Flush", "color": "Red", "quantity": 1})

    with pytest.raises(InsufficientStock):
        boards.sell_board(board.id, 2, "Kamau Hardware", sales)
    with pytest.raises(ValidationMissingField):
        boards.sell_board(board.id, 1, "", sales)
    assert board.quantity == 1


def test_delete_board_keeps_ledger(ctx):
    board = boards.create_board({"type": "Mini-Flush", "color": "Red", "quantity": 1})
    boards.delete_board(board.id)

    assert boards.list_boards() == []
    assert BoardTransaction.query.count() == 1


# ------------------------- tools -------------------------
def test_tool_checkout_cycle(user):
    keeper = user("store_keeper")
    drill = tools.create_tool({"name": "Cordless drill", "code": "TL-001"})
    assert drill.status == "available"
    assert drill.category == "General"

    tools.checkout_tool(drill.id, "Worker Sam", keeper)
    assert drill.status == "checked_out"
    assert drill.checked_out_to == "Worker Sam"
    assert drill.checked_out_by == keeper.id

    with pytest.raises(IllegalTransition):
        tools.checkout_tool(drill.id, "Someone else", keeper)

    tools.return_tool(drill.id, keeper, notes="all good")
    assert drill.status == "available"
    assert drill.checked_out_to is None

    with pytest.raises(IllegalTransition):
        tools.return_tool(drill.id, keeper)

    kinds = [t.transaction_type for t in ToolTransaction.query.order_by(ToolTransaction.id).all()]
    assert kinds == ["checkout", "return"]


def test_damaged_tool_cannot_be_checked_out(user):
    keeper = user("store_keeper")
    crimper = tools.create_tool({"name": "Crimper"})

    with pytest.raises(ValidationMissingField):
        tools.mark_damaged(crimper.id, keeper, "")

    tools.mark_damaged(crimper.id, keeper, "jaw cracked")
    assert crimper.status == "damaged"
    assert crimper.is_damaged

    with pytest.raises(IllegalTransition):
        tools.checkout_tool(crimper.id, "Worker Sam", keeper)


def test_tool_codes_are_unique(ctx):
    tools.create_tool({"name": "Drill", "code": "TL-001"})
    with pytest.raises(DuplicateEntry):
        tools.create_tool({"name": "Other drill", "code": "TL-001"})


# ------------------------- customer goods -------------------------
def test_customer_goods_lifecycle(user):
    sales = user("sales_warehouse")
    goods = customer_goods.create_goods(
        {"customer_name": "Acme Mall", "description": "Old distribution board", "quantity": 2},
        sales,
    )
    assert goods.status == "received"
    assert goods.received_by_name == sales.name

    customer_goods.update_goods(goods.id, {"status": "processed", "notes": "rewired"})
    assert goods.status == "processed"

    with pytest.raises(ValidationError):
        customer_goods.update_goods(goods.id, {"status": "lost"})

    assert [g.id for g in customer_goods.list_goods("processed")] == [goods.id]
    customer_goods.delete_goods(goods.id)
    assert customer_goods.list_goods() == []
