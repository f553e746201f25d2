import logging

from sqlalchemy import func

from josm.errors import DuplicateEntry, NotFound, ValidationError, ValidationMissingField
from josm.extensions import db
from josm.models import Board, BoardTransaction
from josm.models.board import MANUFACTURED, SOLD
from josm.services.materials import deduct
from josm.utils import clean, positive_qty, require, to_int

logger = logging.getLogger(__name__)

# board types that default to a higher low-stock alert level
HIGH_THRESHOLD_TYPES = ("Surface Mounted", "Enclosure")


def default_threshold(board_type) -> int:
    return 5 if board_type in HIGH_THRESHOLD_TYPES else 2


def list_boards():
    return Board.query.order_by(Board.type.asc(), Board.color.asc()).all()


def get_board(board_id, lock=False) -> Board:
    if lock:
        board = (
            Board.query.filter_by(id=board_id)
            .with_for_update()
            .populate_existing()
            .first()
        )
    else:
        board = db.session.get(Board, board_id)
    if not board:
        raise NotFound("Board", board_id)
    return board


def find_board(board_type, color):
    return (
        Board.query
        .filter(Board.type == board_type, func.lower(Board.color) == (color or "").lower())
        .first()
    )


def low_stock_boards():
    return (
        Board.query
        .filter(Board.quantity <= Board.min_threshold)
        .order_by(Board.quantity.asc())
        .all()
    )


def create_board(data, actor=None) -> Board:
    board_type, color = require(data, "type", "color")
    quantity = to_int(data.get("quantity") or 0)
    if data.get("min_threshold") in (None, ""):
        min_threshold = default_threshold(board_type)
    else:
        min_threshold = to_int(data.get("min_threshold"), "min_threshold")
    if quantity < 0 or min_threshold < 0:
        raise ValidationError("quantity and min_threshold cannot be negative")

    if find_board(board_type, color):
        raise DuplicateEntry(f"Board {board_type} - {color} already exists")

    board = Board(type=board_type, color=color, quantity=quantity, min_threshold=min_threshold)
    db.session.add(board)
    db.session.flush()

    if quantity > 0:
        record_transaction(board, MANUFACTURED, quantity, actor, notes="Initial stock")

    db.session.commit()
    logger.info("board %s created with %s units", board.name, quantity)
    return board


def update_board(board_id, data) -> Board:
    board = get_board(board_id)
    if "min_threshold" in data:
        min_threshold = to_int(data.get("min_threshold"), "min_threshold")
        if min_threshold < 0:
            raise ValidationError("min_threshold cannot be negative")

    for field in ("type", "color"):
        value = clean(data.get(field))
        if value:
            setattr(board, field, value)
    if "min_threshold" in data:
        board.min_threshold = min_threshold

    clash = find_board(board.type, board.color)
    if clash and clash.id != board.id:
        db.session.rollback()
        raise DuplicateEntry(f"Board {board.type} - {board.color} already exists")

    db.session.commit()
    return board


def delete_board(board_id):
    board = get_board(board_id)
    db.session.delete(board)
    db.session.commit()
    logger.info("board %s deleted", board.name)


def manufacture_board(board_id, quantity, actor=None, notes=None) -> Board:
    qty = positive_qty(quantity)
    board = get_board(board_id, lock=True)
    board.quantity = (board.quantity or 0) + qty
    record_transaction(board, MANUFACTURED, qty, actor, notes=clean(notes) or "Stock added")
    db.session.commit()
    logger.info("manufactured %s x %s, stock now %s", qty, board.name, board.quantity)
    return board


def sell_board(board_id, quantity, customer_name, actor=None) -> Board:
    qty = positive_qty(quantity)
    customer_name = clean(customer_name)
    if not customer_name:
        raise ValidationMissingField("customer_name")

    board = get_board(board_id, lock=True)
    deduct(board, qty)
    record_transaction(
        board, SOLD, qty, actor,
        customer_name=customer_name,
        notes=f"Sold to {customer_name}",
    )
    db.session.commit()
    logger.info("sold %s x %s to %s, stock now %s", qty, board.name, customer_name, board.quantity)
    return board


def create_finished_board(job, actor_id=None, actor_name=None) -> Board:
    """Add one finished unit for a completed job card.

    Flushes but does not commit; the caller owns the transaction.
    """
    board = find_board(job.board_type, job.board_color)
    if board is None:
        board = Board(
            type=job.board_type,
            color=job.board_color,
            quantity=0,
            min_threshold=default_threshold(job.board_type),
        )
        db.session.add(board)
        db.session.flush()
        logger.info("board %s created from job %s", board.name, job.job_card_number)

    board.quantity = (board.quantity or 0) + 1
    db.session.add(BoardTransaction(
        board_id=board.id,
        board_name=board.name,
        transaction_type=MANUFACTURED,
        quantity=1,
        job_card_number=job.job_card_number,
        user_id=actor_id,
        user_name=actor_name,
        notes=f"Manufactured from job {job.job_card_number}",
    ))
    db.session.flush()
    return board


def list_transactions(board_id=None, start=None, end=None):
    query = BoardTransaction.query
    if board_id is not None:
        query = query.filter(BoardTransaction.board_id == board_id)
    if start:
        query = query.filter(BoardTransaction.date >= start)
    if end:
        query = query.filter(BoardTransaction.date < end)
    return query.order_by(BoardTransaction.date.desc(), BoardTransaction.id.desc()).all()


def record_transaction(board, kind, qty, actor, **fields):
    tx = BoardTransaction(
        board_id=board.id,
        board_name=board.name,
        transaction_type=kind,
        quantity=qty,
        user_id=getattr(actor, "id", None),
        user_name=getattr(actor, "name", None),
        **fields,
    )
    db.session.add(tx)
    return tx
