from datetime import datetime

from josm.extensions import db
from josm.utils import iso

STATUSES = ("received", "processed", "returned")


class CustomerGoods(db.Model):
    __tablename__ = "customer_goods"

    id = db.Column(db.Integer, primary_key=True)
    customer_name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    status = db.Column(db.String(20), nullable=False, default="received")
    received_date = db.Column(db.DateTime, default=datetime.utcnow)
    received_by = db.Column(db.Integer)
    received_by_name = db.Column(db.String(120))
    notes = db.Column(db.Text)

    def to_dict(self):
        return {
            "id": self.id,
            "customer_name": self.customer_name,
            "description": self.description,
            "quantity": self.quantity,
            "status": self.status,
            "received_date": iso(self.received_date),
            "received_by": self.received_by,
            "received_by_name": self.received_by_name,
            "notes": self.notes,
        }

    def __repr__(self):
        return f"<CustomerGoods {self.customer_name} {self.status}>"
