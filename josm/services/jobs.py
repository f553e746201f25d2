"""Job card workflow.

A job card goes through two production stages, fabrication then
assembling, each moving Pending -> In Progress -> Completed. Finishing
assembling completes the job and adds one finished board to stock.

Legal moves, keyed by (stage, current status) -> target status::

    fabrication  Pending      -> In Progress
    fabrication  In Progress  -> Completed
    assembling   Pending      -> In Progress   (fabrication must be Completed)
    assembling   In Progress  -> Completed     (job becomes "completed")

Anything else raises IllegalTransition. A completed job only accepts new
photos.
"""
import logging
import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

from flask import current_app
from sqlalchemy import func, or_

from josm.errors import IllegalTransition, NotFound, ValidationError, ValidationMissingField
from josm.extensions import db, photo_storage
from josm.models import JobCard
from josm.models.job_card import (
    ASSEMBLING, COMPLETED, FABRICATION, IN_PROGRESS, PENDING, PRIORITIES, STAGE_STATUSES, STAGES,
)
from josm.services import boards, materials
from josm.utils import clean, positive_qty, require, to_int

logger = logging.getLogger(__name__)

LEGAL_TRANSITIONS = {
    (FABRICATION, PENDING): IN_PROGRESS,
    (FABRICATION, IN_PROGRESS): COMPLETED,
    (ASSEMBLING, PENDING): IN_PROGRESS,
    (ASSEMBLING, IN_PROGRESS): COMPLETED,
}

DESCRIPTIVE_FIELDS = (
    "job_name", "client_name", "board_name", "board_color", "board_type",
    "recipient_name", "supervisor_name", "notes",
)

DEFAULT_BOARD_TYPE = "Surface Mounted"


def list_jobs(status=None, q=None):
    query = JobCard.query
    if status:
        query = query.filter(JobCard.status == status)
    if q:
        like = f"%{q}%"
        query = query.filter(or_(
            JobCard.job_name.ilike(like),
            JobCard.client_name.ilike(like),
            JobCard.job_card_number.ilike(like),
        ))
    return query.order_by(JobCard.created_at.desc(), JobCard.id.desc()).all()


def get_job(job_id) -> JobCard:
    job = db.session.get(JobCard, job_id)
    if not job:
        raise NotFound("JobCard", job_id)
    return job


def next_job_card_number() -> str:
    n = (db.session.query(func.count(JobCard.id)).scalar() or 0) + 1
    number = f"JC-{n:04d}"
    # deleted job cards leave the count behind the highest number
    while JobCard.query.filter_by(job_card_number=number).first():
        n += 1
        number = f"JC-{n:04d}"
    return number


def create_job(data, actor_id=None, actor_name=None) -> JobCard:
    job_name, client_name = require(data, "job_name", "client_name")
    priority = clean(data.get("priority")) or "Normal"
    if priority not in PRIORITIES:
        raise ValidationError(f"priority must be one of {', '.join(PRIORITIES)}")

    job = JobCard(
        job_card_number=next_job_card_number(),
        job_name=job_name,
        client_name=client_name,
        board_name=clean(data.get("board_name")) or job_name,
        board_color=clean(data.get("board_color")) or "",
        board_type=clean(data.get("board_type")) or DEFAULT_BOARD_TYPE,
        recipient_name=clean(data.get("recipient_name")),
        supervisor_id=to_int(data["supervisor_id"], "supervisor_id") if data.get("supervisor_id") else actor_id,
        supervisor_name=clean(data.get("supervisor_name")) or actor_name,
        priority=priority,
        notes=clean(data.get("notes")),
        photo_urls=[],
        materials_used=[],
        fabrication_status=PENDING,
        assembling_status=PENDING,
        created_by=actor_id,
        created_by_name=actor_name,
    )
    db.session.add(job)
    db.session.commit()
    logger.info("job %s created for %s by %s", job.job_card_number, client_name, actor_name)
    return job


def update_job(job_id, data) -> JobCard:
    job = get_job(job_id)
    _ensure_open(job)

    for field in DESCRIPTIVE_FIELDS:
        if field in data:
            value = clean(data.get(field))
            if field in ("job_name", "client_name") and not value:
                continue
            setattr(job, field, value)
    if "priority" in data:
        priority = clean(data.get("priority")) or "Normal"
        if priority not in PRIORITIES:
            raise ValidationError(f"priority must be one of {', '.join(PRIORITIES)}")
        job.priority = priority

    db.session.commit()
    return job


def delete_job(job_id):
    job = get_job(job_id)
    db.session.delete(job)
    db.session.commit()
    logger.info("job %s deleted", job.job_card_number)


def advance_stage(job_id, stage, target_status, actor_id, actor_name) -> JobCard:
    if stage not in STAGES:
        raise ValidationError(f"stage must be one of {', '.join(STAGES)}")
    if not target_status:
        raise ValidationMissingField("status")
    if target_status not in STAGE_STATUSES:
        raise ValidationError(f"status must be one of {', '.join(STAGE_STATUSES)}")

    job = get_job(job_id)
    _ensure_open(job)

    current = getattr(job, f"{stage}_status")
    if LEGAL_TRANSITIONS.get((stage, current)) != target_status:
        logger.warning("job %s: illegal %s move %s -> %s",
                       job.job_card_number, stage, current, target_status)
        raise IllegalTransition(
            f"{stage} cannot move from {current} to {target_status} on {job.job_card_number}"
        )
    if stage == ASSEMBLING and job.fabrication_status != COMPLETED:
        raise IllegalTransition(
            f"assembling cannot start before fabrication is completed on {job.job_card_number}"
        )

    now = datetime.utcnow()
    setattr(job, f"{stage}_status", target_status)
    setattr(job, f"{stage}_by", actor_id)
    setattr(job, f"{stage}_by_name", actor_name)
    if target_status == IN_PROGRESS:
        setattr(job, f"{stage}_started_at", now)
    else:
        setattr(job, f"{stage}_completed_at", now)

    if stage == ASSEMBLING and target_status == COMPLETED:
        job.completed_at = now
        _materialize_board(job, actor_id, actor_name)

    db.session.commit()
    logger.info("job %s: %s -> %s by %s (status %s)",
                job.job_card_number, stage, target_status, actor_name, job.status)
    return job


def _materialize_board(job, actor_id, actor_name):
    # The savepoint keeps the board row and its ledger entry together; if it
    # fails only the savepoint is rolled back and the job still completes.
    try:
        with db.session.begin_nested():
            boards.create_finished_board(job, actor_id, actor_name)
    except Exception:
        logger.exception("job %s completed but finished board was not recorded",
                         job.job_card_number)


def add_materials_to_job(job_id, entries) -> JobCard:
    """Append usage rows to ``materials_used``.

    Bookkeeping only: stock is deducted through approved material requests.
    """
    job = get_job(job_id)
    _ensure_open(job)
    if not entries or not isinstance(entries, (list, tuple)):
        raise ValidationError("at least one material entry is required")

    new_rows = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise ValidationError("each material entry must be an object")
        if entry.get("material_id") in (None, ""):
            raise ValidationMissingField("material_id")
        mat = materials.get_material(to_int(entry.get("material_id"), "material_id"))
        process = clean(entry.get("process")) or job.status
        if process not in STAGES:
            raise ValidationError(f"process must be one of {', '.join(STAGES)}")
        new_rows.append({
            "material_id": mat.id,
            "material_name": mat.display_name,
            "quantity": positive_qty(entry.get("quantity")),
            "process": process,
        })

    # JSON columns only notice reassignment
    job.materials_used = list(job.materials_used or []) + new_rows
    db.session.commit()
    logger.info("job %s: %s material rows added", job.job_card_number, len(new_rows))
    return job


def add_photos(job_id, files) -> JobCard:
    job = get_job(job_id)
    files = [f for f in files if f and f.filename]
    if not files:
        raise ValidationError("no photos uploaded")

    def upload(f):
        path = f"jobs/{job.job_card_number}/{uuid.uuid4().hex[:8]}_{f.filename}"
        return photo_storage.upload(f, path)

    workers = current_app.config.get("PHOTO_UPLOAD_WORKERS", 4)
    with ThreadPoolExecutor(max_workers=workers) as pool:
        urls = list(pool.map(upload, files))

    job.photo_urls = list(job.photo_urls or []) + urls
    db.session.commit()
    logger.info("job %s: %s photos added", job.job_card_number, len(urls))
    return job


def _ensure_open(job):
    if job.is_completed:
        raise IllegalTransition(f"Job {job.job_card_number} is completed and can no longer change")
