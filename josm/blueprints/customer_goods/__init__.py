from flask import Blueprint

customer_goods_bp = Blueprint("customer_goods", __name__, url_prefix="/customer-goods")

from . import routes  # noqa: E402,F401
