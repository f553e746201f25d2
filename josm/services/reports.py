from sqlalchemy import func

from josm.extensions import db
from josm.models import Board, CustomerGoods, JobCard, Material, MaterialRequest, Tool
from josm.models.job_card import ASSEMBLING, COMPLETED_JOB, FABRICATION
from josm.models.material_request import PENDING
from josm.models.tool import CHECKED_OUT, DAMAGED


def summary():
    jobs_by_status = dict(
        db.session.query(JobCard.status, func.count(JobCard.id))
        .group_by(JobCard.status)
        .all()
    )

    return {
        "materials": {
            "total": Material.query.count(),
            "low_stock": Material.query.filter(Material.quantity <= Material.min_threshold).count(),
        },
        "boards": {
            "total_units": db.session.query(func.coalesce(func.sum(Board.quantity), 0)).scalar(),
            "low_stock": Board.query.filter(Board.quantity <= Board.min_threshold).count(),
        },
        "requests": {
            "pending": MaterialRequest.query.filter_by(status=PENDING).count(),
        },
        "jobs": {
            status: jobs_by_status.get(status, 0)
            for status in (FABRICATION, ASSEMBLING, COMPLETED_JOB)
        },
        "tools": {
            "checked_out": Tool.query.filter_by(status=CHECKED_OUT).count(),
            "damaged": Tool.query.filter_by(status=DAMAGED).count(),
        },
        "customer_goods": {
            "on_hand": CustomerGoods.query.filter(CustomerGoods.status != "returned").count(),
        },
    }
