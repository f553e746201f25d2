from datetime import datetime

from josm.extensions import db
from josm.utils import iso

AVAILABLE = "available"
CHECKED_OUT = "checked_out"
DAMAGED = "damaged"


class Tool(db.Model):
    __tablename__ = "tools"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    code = db.Column(db.String(50), unique=True)
    category = db.Column(db.String(80), default="General")
    status = db.Column(db.String(20), nullable=False, default=AVAILABLE)

    checked_out_to = db.Column(db.String(120))
    checked_out_by = db.Column(db.Integer)
    checked_out_date = db.Column(db.DateTime)
    is_damaged = db.Column(db.Boolean, default=False)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "code": self.code,
            "category": self.category or "General",
            "status": self.status,
            "checked_out_to": self.checked_out_to,
            "checked_out_by": self.checked_out_by,
            "checked_out_date": iso(self.checked_out_date),
            "is_damaged": bool(self.is_damaged),
        }

    def __repr__(self):
        return f"<Tool {self.name} {self.status}>"


class ToolTransaction(db.Model):
    __tablename__ = "tool_transactions"

    id = db.Column(db.Integer, primary_key=True)
    tool_id = db.Column(db.Integer, db.ForeignKey("tools.id", ondelete="SET NULL"))
    tool_name = db.Column(db.String(200))
    transaction_type = db.Column(db.String(20), nullable=False)  # checkout | return | damage
    user_id = db.Column(db.Integer)
    user_name = db.Column(db.String(120))
    notes = db.Column(db.Text)
    date = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "tool_id": self.tool_id,
            "tool_name": self.tool_name,
            "type": self.transaction_type,
            "user_id": self.user_id,
            "user_name": self.user_name,
            "notes": self.notes,
            "date": iso(self.date),
        }
