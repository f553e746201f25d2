from datetime import datetime

from josm.extensions import db
from josm.utils import iso


class Material(db.Model):
    __tablename__ = "materials"
    __table_args__ = (
        db.UniqueConstraint("category", "name", "variant", name="uq_material_key"),
    )

    id = db.Column(db.Integer, primary_key=True)
    category = db.Column(db.String(80), nullable=False)
    name = db.Column(db.String(200), nullable=False)
    variant = db.Column(db.String(80))
    unit = db.Column(db.String(20), nullable=False, default="pcs")

    quantity = db.Column(db.Integer, nullable=False, default=0)
    min_threshold = db.Column(db.Integer, nullable=False, default=0)

    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def display_name(self):
        return f"{self.name} ({self.variant})" if self.variant else self.name

    @property
    def low_stock(self):
        return (self.quantity or 0) <= (self.min_threshold or 0)

    def to_dict(self):
        return {
            "id": self.id,
            "category": self.category,
            "name": self.name,
            "variant": self.variant,
            "unit": self.unit,
            "quantity": self.quantity,
            "min_threshold": self.min_threshold,
            "low_stock": self.low_stock,
            "updated_at": iso(self.updated_at),
        }

    def __repr__(self):
        return f"<Material {self.display_name}>"


class MaterialTransaction(db.Model):
    __tablename__ = "material_transactions"

    id = db.Column(db.Integer, primary_key=True)
    material_id = db.Column(db.Integer, db.ForeignKey("materials.id"), nullable=False)
    material_name = db.Column(db.String(200))
    transaction_type = db.Column(db.String(20), nullable=False)  # issue | receive | return
    quantity = db.Column(db.Integer, nullable=False)

    user_id = db.Column(db.Integer)
    user_name = db.Column(db.String(120))

    job_card_number = db.Column(db.String(20))
    board_name = db.Column(db.String(200))
    board_color = db.Column(db.String(40))
    recipient_name = db.Column(db.String(120))
    notes = db.Column(db.Text)
    date = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "material_id": self.material_id,
            "material_name": self.material_name,
            "type": self.transaction_type,
            "quantity": self.quantity,
            "user_id": self.user_id,
            "user_name": self.user_name,
            "job_card_number": self.job_card_number,
            "board_name": self.board_name,
            "board_color": self.board_color,
            "recipient_name": self.recipient_name,
            "notes": self.notes,
            "date": iso(self.date),
        }

    def __repr__(self):
        return f"<MaterialTransaction {self.id} {self.transaction_type} {self.quantity}>"
