from datetime import datetime

from josm.extensions import db
from josm.utils import iso

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"


class MaterialRequest(db.Model):
    __tablename__ = "material_requests"

    id = db.Column(db.Integer, primary_key=True)
    material_id = db.Column(db.Integer, db.ForeignKey("materials.id"), nullable=False)
    material_name = db.Column(db.String(200))
    quantity = db.Column(db.Integer, nullable=False)

    requested_by = db.Column(db.Integer, db.ForeignKey("users.id"))
    requested_by_name = db.Column(db.String(120))
    job_card_number = db.Column(db.String(20), nullable=False)

    status = db.Column(db.String(20), nullable=False, default=PENDING)  # pending | approved | rejected
    request_date = db.Column(db.DateTime, default=datetime.utcnow)

    approved_by = db.Column(db.Integer)
    approved_by_name = db.Column(db.String(120))
    approval_date = db.Column(db.DateTime)

    notes = db.Column(db.Text)

    material = db.relationship("Material")

    def to_dict(self):
        return {
            "id": self.id,
            "material_id": self.material_id,
            "material_name": self.material_name,
            "quantity": self.quantity,
            "requested_by": self.requested_by,
            "requested_by_name": self.requested_by_name,
            "job_card_number": self.job_card_number,
            "status": self.status,
            "request_date": iso(self.request_date),
            "approved_by": self.approved_by,
            "approved_by_name": self.approved_by_name,
            "approval_date": iso(self.approval_date),
            "notes": self.notes,
        }

    def __repr__(self):
        return f"<MaterialRequest {self.id} {self.status}>"
