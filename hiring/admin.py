from flask import Blueprint, current_app, jsonify, request

from hiring.auth import current_user, login_required, staff_required
from hiring.errors import NotFoundError, ValidationError, parse_body
from hiring.log import get_logger
from hiring.recruitment import RecruitmentService
from hiring.schemas import (
    ApplicationDetail,
    ApplicationOut,
    AssignmentResult,
    AssignRequest,
    JobCreate,
    JobOut,
    JobUpdate,
    ScoreRequest,
    StatusUpdate,
    UserOut,
)
from hiring.storage import get_storage

log = get_logger(__name__)

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")
recruiter_bp = Blueprint("recruiter", __name__, url_prefix="/api/recruiter")


def recruitment_service() -> RecruitmentService:
    cfg = current_app.config
    return RecruitmentService(
        get_storage(),
        auto_weight=cfg["AUTO_SCORE_WEIGHT"],
        ranking_limit=cfg["RANKING_LIMIT"],
        final_limit=cfg["FINAL_LIMIT"],
        today=cfg.get("SCORING_DATE"),
    )


def _job_id_arg(job_id):
    if job_id is not None:
        return job_id
    raw = request.args.get("jobId", "").strip()
    if not raw:
        raise ValidationError("jobId is required")
    try:
        return int(raw)
    except ValueError:
        raise ValidationError("jobId must be an integer")


# ---------- jobs ----------

@admin_bp.get("/jobs")
@staff_required
def list_jobs():
    jobs = get_storage().list_jobs(active_only=False)
    return jsonify([JobOut.model_validate(j).dump() for j in jobs])


@admin_bp.post("/jobs")
@staff_required
def create_job():
    data = parse_body(JobCreate)
    job = get_storage().create_job(**data.model_dump())
    log.info("Job %s created by user %s", job.id, current_user().id)
    return jsonify(JobOut.model_validate(job).dump()), 201


@admin_bp.patch("/jobs/<int:job_id>")
@staff_required
def update_job(job_id: int):
    data = parse_body(JobUpdate)
    job = get_storage().update_job(job_id, **data.model_dump(exclude_unset=True))
    if job is None:
        raise NotFoundError("Job not found")
    return jsonify(JobOut.model_validate(job).dump())


# ---------- applications ----------

@admin_bp.patch("/applications/<int:application_id>/status")
@staff_required
def update_application_status(application_id: int):
    data = parse_body(StatusUpdate)
    app = get_storage().update_application(application_id, status=data.status)
    if app is None:
        raise NotFoundError("Application not found")
    return jsonify(ApplicationOut.model_validate(app).dump())


@admin_bp.get("/recruiters")
@staff_required
def list_recruiters():
    return jsonify([UserOut.model_validate(u).dump() for u in recruitment_service().get_recruiters()])


# ---------- scoring pipeline ----------

@admin_bp.get("/top-candidates")
@admin_bp.get("/top-candidates/<int:job_id>")
@staff_required
def top_candidates(job_id=None):
    ranked = recruitment_service().get_top_candidates(_job_id_arg(job_id))
    return jsonify([c.dump() for c in ranked])


@admin_bp.post("/assign-candidates")
@staff_required
def assign_candidates():
    data = parse_body(AssignRequest)
    result = recruitment_service().assign_candidates(data.application_ids, data.recruiter_id)
    return jsonify(AssignmentResult(**result).dump())


@admin_bp.get("/final-top3")
@admin_bp.get("/final-top3/<int:job_id>")
@staff_required
def final_top3(job_id=None):
    final = recruitment_service().get_final_top3(_job_id_arg(job_id))
    return jsonify([c.dump() for c in final])


@recruiter_bp.get("/assigned-candidates")
@login_required
def assigned_candidates():
    out = []
    for item in recruitment_service().get_assigned_applications(current_user().id):
        row = ApplicationDetail.model_validate(item["application"])
        row.candidate = UserOut.model_validate(item["candidate"]) if item["candidate"] else None
        row.job = JobOut.model_validate(item["job"]) if item["job"] else None
        out.append(row.dump())
    return jsonify(out)


@recruiter_bp.put("/score/<int:application_id>")
@login_required
def submit_score(application_id: int):
    data = parse_body(ScoreRequest)
    app = recruitment_service().update_manual_score(
        application_id, current_user(), data.score, data.notes
    )
    return jsonify(ApplicationOut.model_validate(app).dump())
