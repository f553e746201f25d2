from datetime import datetime

from josm.extensions import db
from josm.utils import iso

MANUFACTURED = "manufactured"
SOLD = "sold"


class Board(db.Model):
    __tablename__ = "boards"
    __table_args__ = (db.UniqueConstraint("type", "color", name="uq_board_type_color"),)

    id = db.Column(db.Integer, primary_key=True)
    type = db.Column(db.String(60), nullable=False)
    color = db.Column(db.String(40), nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=0)
    min_threshold = db.Column(db.Integer, nullable=False, default=2)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def name(self):
        return f"{self.type} - {self.color}"

    def to_dict(self):
        return {
            "id": self.id,
            "type": self.type,
            "color": self.color,
            "name": self.name,
            "quantity": self.quantity,
            "min_threshold": self.min_threshold,
            "low_stock": (self.quantity or 0) <= (self.min_threshold or 0),
            "updated_at": iso(self.updated_at),
        }

    def __repr__(self):
        return f"<Board {self.name} x{self.quantity}>"


class BoardTransaction(db.Model):
    __tablename__ = "board_transactions"

    id = db.Column(db.Integer, primary_key=True)
    board_id = db.Column(db.Integer, db.ForeignKey("boards.id", ondelete="SET NULL"))
    board_name = db.Column(db.String(120))
    transaction_type = db.Column(db.String(20), nullable=False)  # manufactured | sold
    quantity = db.Column(db.Integer, nullable=False)
    customer_name = db.Column(db.String(200))
    job_card_number = db.Column(db.String(20))
    user_id = db.Column(db.Integer)
    user_name = db.Column(db.String(120))
    notes = db.Column(db.Text)
    date = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "board_id": self.board_id,
            "board_name": self.board_name,
            "type": self.transaction_type,
            "quantity": self.quantity,
            "customer_name": self.customer_name,
            "job_card_number": self.job_card_number,
            "user_id": self.user_id,
            "user_name": self.user_name,
            "notes": self.notes,
            "date": iso(self.date),
        }
