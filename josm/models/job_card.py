from datetime import datetime

from sqlalchemy import case
from sqlalchemy.ext.hybrid import hybrid_property

from josm.extensions import db
from josm.utils import iso

FABRICATION = "fabrication"
ASSEMBLING = "assembling"
COMPLETED_JOB = "completed"
STAGES = (FABRICATION, ASSEMBLING)

PENDING = "Pending"
IN_PROGRESS = "In Progress"
COMPLETED = "Completed"
STAGE_STATUSES = (PENDING, IN_PROGRESS, COMPLETED)

PRIORITIES = ("Low", "Normal", "High")


def derive_status(fabrication_status, assembling_status):
    """Overall job status from the two stage statuses."""
    if assembling_status == COMPLETED:
        return COMPLETED_JOB
    if assembling_status == IN_PROGRESS:
        return ASSEMBLING
    return FABRICATION


class JobCard(db.Model):
    __tablename__ = "job_cards"

    id = db.Column(db.Integer, primary_key=True)
    job_card_number = db.Column(db.String(20), nullable=False, unique=True)

    job_name = db.Column(db.String(200), nullable=False)
    client_name = db.Column(db.String(200), nullable=False)
    board_name = db.Column(db.String(200))
    board_color = db.Column(db.String(40))
    board_type = db.Column(db.String(60))
    recipient_name = db.Column(db.String(120))
    supervisor_id = db.Column(db.Integer)
    supervisor_name = db.Column(db.String(120))
    priority = db.Column(db.String(10), default="Normal")
    notes = db.Column(db.Text)
    photo_urls = db.Column(db.JSON, default=list)

    fabrication_status = db.Column(db.String(20), nullable=False, default=PENDING)
    fabrication_by = db.Column(db.Integer)
    fabrication_by_name = db.Column(db.String(120))
    fabrication_started_at = db.Column(db.DateTime)
    fabrication_completed_at = db.Column(db.DateTime)

    assembling_status = db.Column(db.String(20), nullable=False, default=PENDING)
    assembling_by = db.Column(db.Integer)
    assembling_by_name = db.Column(db.String(120))
    assembling_started_at = db.Column(db.DateTime)
    assembling_completed_at = db.Column(db.DateTime)

    completed_at = db.Column(db.DateTime)

    # [{material_id, material_name, quantity, process}]
    materials_used = db.Column(db.JSON, default=list)

    created_by = db.Column(db.Integer)
    created_by_name = db.Column(db.String(120))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @hybrid_property
    def status(self):
        return derive_status(self.fabrication_status, self.assembling_status)

    @status.expression
    def status(cls):
        return case(
            (cls.assembling_status == COMPLETED, COMPLETED_JOB),
            (cls.assembling_status == IN_PROGRESS, ASSEMBLING),
            else_=FABRICATION,
        )

    @property
    def is_completed(self):
        return self.status == COMPLETED_JOB

    def to_dict(self):
        return {
            "id": self.id,
            "job_card_number": self.job_card_number,
            "job_name": self.job_name,
            "client_name": self.client_name,
            "board_name": self.board_name,
            "board_color": self.board_color,
            "board_type": self.board_type,
            "recipient_name": self.recipient_name,
            "supervisor_id": self.supervisor_id,
            "supervisor_name": self.supervisor_name,
            "priority": self.priority,
            "notes": self.notes,
            "photo_urls": list(self.photo_urls or []),
            "status": self.status,
            "fabrication_status": self.fabrication_status,
            "fabrication_by": self.fabrication_by,
            "fabrication_by_name": self.fabrication_by_name,
            "fabrication_started_at": iso(self.fabrication_started_at),
            "fabrication_completed_at": iso(self.fabrication_completed_at),
            "assembling_status": self.assembling_status,
            "assembling_by": self.assembling_by,
            "assembling_by_name": self.assembling_by_name,
            "assembling_started_at": iso(self.assembling_started_at),
            "assembling_completed_at": iso(self.assembling_completed_at),
            "completed_at": iso(self.completed_at),
            "materials_used": list(self.materials_used or []),
            "created_by": self.created_by,
            "created_by_name": self.created_by_name,
            "created_at": iso(self.created_at),
        }

    def __repr__(self):
        return f"<JobCard {self.job_card_number} {self.status}>"
