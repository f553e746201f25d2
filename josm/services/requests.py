"""Material requests raised by the shop floor.

A request moves once, from ``pending`` to ``approved`` or ``rejected``.
Approval deducts the material stock and writes an ``issue`` row to the
material ledger; stock, request and ledger are committed together.
"""
import logging
from datetime import datetime

from josm.errors import IllegalTransition, NotFound, ValidationMissingField
from josm.extensions import db
from josm.models import MaterialRequest
from josm.models.material_request import APPROVED, PENDING, REJECTED
from josm.services import materials
from josm.utils import clean, positive_qty

logger = logging.getLogger(__name__)


def list_requests(status=None, requested_by=None):
    query = MaterialRequest.query
    if status:
        query = query.filter_by(status=status)
    if requested_by is not None:
        query = query.filter_by(requested_by=requested_by)
    return query.order_by(MaterialRequest.id.desc()).all()


def get_request(request_id, lock=False) -> MaterialRequest:
    if lock:
        req = (
            MaterialRequest.query.filter_by(id=request_id)
            .with_for_update()
            .populate_existing()
            .first()
        )
    else:
        req = db.session.get(MaterialRequest, request_id)
    if not req:
        raise NotFound("MaterialRequest", request_id)
    return req


def create_request(material_id, quantity, job_card_number, actor, notes=None) -> MaterialRequest:
    qty = positive_qty(quantity)
    job_card_number = clean(job_card_number)
    if not job_card_number:
        raise ValidationMissingField("job_card_number")

    mat = materials.get_material(material_id)

    req = MaterialRequest(
        material_id=mat.id,
        material_name=mat.display_name,
        quantity=qty,
        requested_by=actor.id,
        requested_by_name=actor.name,
        job_card_number=job_card_number,
        status=PENDING,
        notes=clean(notes),
    )
    db.session.add(req)
    db.session.commit()
    logger.info("request %s: %s x %s for %s by %s",
                req.id, qty, mat.display_name, job_card_number, actor.name)
    return req


def approve_request(request_id, actor, notes=None) -> MaterialRequest:
    req = get_request(request_id, lock=True)
    _ensure_pending(req)

    # stock is re-read under lock; an InsufficientStock leaves both rows untouched
    mat = materials.get_material(req.material_id, lock=True)
    materials.deduct(mat, req.quantity)

    req.status = APPROVED
    req.approved_by = actor.id
    req.approved_by_name = actor.name
    req.approval_date = datetime.utcnow()
    if clean(notes):
        req.notes = clean(notes)

    materials.record_transaction(
        mat, materials.ISSUE, req.quantity, actor,
        job_card_number=req.job_card_number,
        recipient_name=req.requested_by_name,
        notes=clean(notes) or f"Request #{req.id} approved",
    )
    db.session.commit()
    logger.info("request %s approved by %s, %s stock now %s",
                req.id, actor.name, mat.display_name, mat.quantity)
    return req


def reject_request(request_id, actor, notes=None) -> MaterialRequest:
    req = get_request(request_id, lock=True)
    _ensure_pending(req)

    req.status = REJECTED
    req.approved_by = actor.id
    req.approved_by_name = actor.name
    req.approval_date = datetime.utcnow()
    if clean(notes):
        req.notes = clean(notes)

    db.session.commit()
    logger.info("request %s rejected by %s", req.id, actor.name)
    return req


def _ensure_pending(req):
    if req.status != PENDING:
        logger.warning("request %s is %s, not pending", req.id, req.status)
        raise IllegalTransition(f"Request #{req.id} is already {req.status}")
