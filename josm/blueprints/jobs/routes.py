from flask import jsonify, request
from flask_login import current_user

from josm.blueprints import payload
from josm.errors import ValidationError
from josm.models.job_card import ASSEMBLING, COMPLETED, STAGES
from josm.permissions import has_permission, perm_required
from josm.services import jobs
from . import jobs_bp


@jobs_bp.get("")
@perm_required("view_job_cards")
def jobs_list():
    status = (request.args.get("status") or "").strip().lower() or None
    q = (request.args.get("q") or "").strip() or None
    return jsonify([j.to_dict() for j in jobs.list_jobs(status=status, q=q)])


@jobs_bp.post("")
@perm_required("manage_job_cards")
def job_create():
    job = jobs.create_job(payload(), current_user.id, current_user.name)
    return jsonify(job.to_dict()), 201


@jobs_bp.get("/<int:job_id>")
@perm_required("view_job_cards")
def job_detail(job_id):
    return jsonify(jobs.get_job(job_id).to_dict())


@jobs_bp.patch("/<int:job_id>")
@perm_required("manage_job_cards")
def job_update(job_id):
    return jsonify(jobs.update_job(job_id, payload()).to_dict())


@jobs_bp.delete("/<int:job_id>")
@perm_required("manage_job_cards")
def job_delete(job_id):
    jobs.delete_job(job_id)
    return jsonify({"message": "Job card deleted."})


@jobs_bp.post("/<int:job_id>/stages/<stage>")
@perm_required("update_fabrication", "update_assembling")
def job_advance(job_id, stage):
    if stage not in STAGES:
        raise ValidationError(f"stage must be one of {', '.join(STAGES)}")
    if not has_permission(current_user, f"update_{stage}"):
        return jsonify({"error": "forbidden", "message": f"you cannot update {stage}"}), 403

    job = jobs.advance_stage(job_id, stage, payload().get("status"), current_user.id, current_user.name)

    message = f"{stage.capitalize()} updated."
    if stage == ASSEMBLING and job.assembling_status == COMPLETED:
        message = "Job completed. Board has been added to Finished Boards inventory."
    return jsonify({"job": job.to_dict(), "message": message})


@jobs_bp.post("/<int:job_id>/materials")
@perm_required("manage_job_cards", "update_fabrication", "update_assembling")
def job_add_materials(job_id):
    data = request.get_json(silent=True)
    entries = data.get("materials") if isinstance(data, dict) else data
    job = jobs.add_materials_to_job(job_id, entries or [])
    return jsonify(job.to_dict())


@jobs_bp.post("/<int:job_id>/photos")
@perm_required("manage_job_cards", "update_fabrication", "update_assembling")
def job_add_photos(job_id):
    job = jobs.add_photos(job_id, request.files.getlist("photos"))
    return jsonify(job.to_dict())
