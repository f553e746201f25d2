import logging

from josm.errors import NotFound, ValidationError
from josm.extensions import db
from josm.models import CustomerGoods
from josm.models.customer_goods import STATUSES
from josm.utils import clean, positive_qty, require

logger = logging.getLogger(__name__)


def list_goods(status=None):
    query = CustomerGoods.query
    if status:
        query = query.filter_by(status=status)
    return query.order_by(CustomerGoods.received_date.desc(), CustomerGoods.id.desc()).all()


def get_goods(goods_id) -> CustomerGoods:
    goods = db.session.get(CustomerGoods, goods_id)
    if not goods:
        raise NotFound("CustomerGoods", goods_id)
    return goods


def create_goods(data, actor) -> CustomerGoods:
    customer_name, description = require(data, "customer_name", "description")
    goods = CustomerGoods(
        customer_name=customer_name,
        description=description,
        quantity=positive_qty(data.get("quantity")),
        status="received",
        received_by=actor.id,
        received_by_name=actor.name,
        notes=clean(data.get("notes")),
    )
    db.session.add(goods)
    db.session.commit()
    logger.info("customer goods from %s received by %s", customer_name, actor.name)
    return goods


def update_goods(goods_id, data) -> CustomerGoods:
    goods = get_goods(goods_id)
    for field in ("customer_name", "description"):
        value = clean(data.get(field))
        if value:
            setattr(goods, field, value)
    if "quantity" in data:
        goods.quantity = positive_qty(data.get("quantity"))
    if "status" in data:
        status = clean(data.get("status"))
        if status not in STATUSES:
            raise ValidationError(f"status must be one of {', '.join(STATUSES)}")
        goods.status = status
    if "notes" in data:
        goods.notes = clean(data.get("notes"))
    db.session.commit()
    return goods


def delete_goods(goods_id):
    goods = get_goods(goods_id)
    db.session.delete(goods)
    db.session.commit()
