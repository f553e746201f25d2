import logging

from sqlalchemy import or_

from josm.errors import DuplicateEntry, InsufficientStock, NotFound, ValidationError
from josm.extensions import db
from josm.models import Material, MaterialTransaction
from josm.utils import clean, positive_qty, require, to_int

logger = logging.getLogger(__name__)

RECEIVE = "receive"
ISSUE = "issue"
RETURN = "return"


def list_materials(q=None):
    query = Material.query
    if q:
        like = f"%{q}%"
        query = query.filter(or_(
            Material.name.ilike(like),
            Material.category.ilike(like),
            Material.variant.ilike(like),
        ))
    return query.order_by(Material.category.asc(), Material.name.asc()).all()


def get_material(material_id, lock=False) -> Material:
    if lock:
        mat = (
            Material.query.filter_by(id=material_id)
            .with_for_update()
            .populate_existing()
            .first()
        )
    else:
        mat = db.session.get(Material, material_id)
    if not mat:
        raise NotFound("Material", material_id)
    return mat


def low_stock_materials():
    return (
        Material.query
        .filter(Material.quantity <= Material.min_threshold)
        .order_by(Material.quantity.asc())
        .all()
    )


def create_material(data, actor=None) -> Material:
    category, name = require(data, "category", "name")
    variant = clean(data.get("variant"))
    unit = clean(data.get("unit")) or "pcs"
    quantity = to_int(data.get("quantity") or 0)
    min_threshold = to_int(data.get("min_threshold") or 0, "min_threshold")
    if quantity < 0 or min_threshold < 0:
        raise ValidationError("quantity and min_threshold cannot be negative")

    if Material.query.filter_by(category=category, name=name, variant=variant).first():
        raise DuplicateEntry(f"Material {name} already exists in {category}")

    mat = Material(
        category=category,
        name=name,
        variant=variant,
        unit=unit,
        quantity=quantity,
        min_threshold=min_threshold,
    )
    db.session.add(mat)
    db.session.flush()

    if mat.quantity > 0:
        record_transaction(mat, RECEIVE, mat.quantity, actor, notes="Initial stock")

    db.session.commit()
    logger.info("material %s created with %s %s", mat.display_name, mat.quantity, mat.unit)
    return mat


def update_material(material_id, data) -> Material:
    mat = get_material(material_id)
    if "min_threshold" in data:
        min_threshold = to_int(data.get("min_threshold"), "min_threshold")
        if min_threshold < 0:
            raise ValidationError("min_threshold cannot be negative")

    for field in ("category", "name", "unit"):
        if field in data:
            value = clean(data.get(field))
            if value:
                setattr(mat, field, value)
    if "variant" in data:
        mat.variant = clean(data.get("variant"))
    if "min_threshold" in data:
        mat.min_threshold = min_threshold

    clash = Material.query.filter(
        Material.category == mat.category,
        Material.name == mat.name,
        Material.variant.is_(None) if mat.variant is None else Material.variant == mat.variant,
        Material.id != mat.id,
    ).first()
    if clash:
        db.session.rollback()
        raise DuplicateEntry(f"Another material {mat.name} already exists in {mat.category}")

    db.session.commit()
    return mat


def receive_material(material_id, quantity, actor=None, notes=None) -> Material:
    qty = positive_qty(quantity)
    mat = get_material(material_id, lock=True)
    mat.quantity = (mat.quantity or 0) + qty
    record_transaction(mat, RECEIVE, qty, actor, notes=clean(notes) or "Stock received")
    db.session.commit()
    logger.info("received %s x %s, stock now %s", qty, mat.display_name, mat.quantity)
    return mat


def return_material(material_id, quantity, actor=None, notes=None) -> Material:
    qty = positive_qty(quantity)
    mat = get_material(material_id, lock=True)
    mat.quantity = (mat.quantity or 0) + qty
    record_transaction(mat, RETURN, qty, actor, notes=clean(notes) or "Returned to store")
    db.session.commit()
    logger.info("returned %s x %s, stock now %s", qty, mat.display_name, mat.quantity)
    return mat


def issue_material(material_id, quantity, actor=None, job_card_number=None,
                   recipient_name=None, notes=None) -> Material:
    qty = positive_qty(quantity)
    mat = get_material(material_id, lock=True)
    deduct(mat, qty)
    record_transaction(
        mat, ISSUE, qty, actor,
        job_card_number=clean(job_card_number),
        recipient_name=clean(recipient_name),
        notes=clean(notes),
    )
    db.session.commit()
    logger.info("issued %s x %s, stock now %s", qty, mat.display_name, mat.quantity)
    return mat


def deduct(item, qty: int):
    """Subtract from any stock row (material or board), never below zero."""
    label = getattr(item, "display_name", None) or item.name
    available = item.quantity or 0
    if available < qty:
        logger.warning(
            "insufficient stock for %s: available=%s requested=%s",
            label, available, qty,
        )
        raise InsufficientStock(label, available, qty)
    item.quantity = available - qty


def list_transactions(material_id=None, start=None, end=None):
    query = MaterialTransaction.query
    if material_id is not None:
        query = query.filter(MaterialTransaction.material_id == material_id)
    if start:
        query = query.filter(MaterialTransaction.date >= start)
    if end:
        query = query.filter(MaterialTransaction.date < end)
    return query.order_by(MaterialTransaction.date.desc(), MaterialTransaction.id.desc()).all()


def record_transaction(mat, kind, qty, actor, **fields):
    tx = MaterialTransaction(
        material_id=mat.id,
        material_name=mat.display_name,
        transaction_type=kind,
        quantity=qty,
        user_id=getattr(actor, "id", None),
        user_name=getattr(actor, "name", None),
        **fields,
    )
    db.session.add(tx)
    return tx
