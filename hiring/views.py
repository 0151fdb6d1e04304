from flask import Blueprint, jsonify, request

from hiring.auth import current_user, login_required
from hiring.errors import ConflictError, NotFoundError, ValidationError, parse_body
from hiring.log import get_logger
from hiring.schemas import (
    ApplicationCreate,
    ApplicationDetail,
    ApplicationOut,
    JobOut,
    ProfileUpdate,
    UserOut,
)
from hiring.storage import get_storage

log = get_logger(__name__)

api_bp = Blueprint("api", __name__, url_prefix="/api")


def _csv_arg(name: str) -> list:
    raw = request.args.get(name, "")
    return [v.strip() for v in raw.split(",") if v.strip()]


@api_bp.get("/jobs")
def list_jobs():
    jobs = get_storage().list_jobs(
        active_only=True,
        search=request.args.get("search", "").strip() or None,
        contract_types=_csv_arg("contractType"),
        experience_levels=_csv_arg("experienceLevel"),
        location=request.args.get("location", "").strip() or None,
    )
    return jsonify([JobOut.model_validate(j).dump() for j in jobs])


@api_bp.get("/jobs/<int:job_id>")
def get_job(job_id: int):
    job = get_storage().get_job(job_id)
    if job is None:
        raise NotFoundError("Job not found")
    return jsonify(JobOut.model_validate(job).dump())


@api_bp.get("/applications")
@login_required
def my_applications():
    storage = get_storage()
    out = []
    for app in storage.list_applications_by_user(current_user().id):
        row = ApplicationDetail.model_validate(app)
        job = storage.get_job(app.job_id)
        row.job = JobOut.model_validate(job) if job else None
        out.append(row.dump())
    return jsonify(out)


@api_bp.post("/applications")
@login_required
def apply():
    data = parse_body(ApplicationCreate)
    storage = get_storage()
    user = current_user()

    job = storage.get_job(data.job_id)
    if job is None:
        raise NotFoundError("Job not found")
    if not job.is_active:
        raise ValidationError("This job is no longer accepting applications")
    if storage.find_application(user.id, job.id):
        raise ConflictError("You have already applied to this job")

    app = storage.create_application(
        user_id=user.id,
        status="pending",
        **data.model_dump(),
    )
    log.info("User %s applied to job %s (application %s)", user.id, job.id, app.id)
    return jsonify(ApplicationOut.model_validate(app).dump()), 201


@api_bp.put("/profile/complete")
@login_required
def complete_profile():
    """Fill in or edit the candidate profile the scoring reads from."""
    data = parse_body(ProfileUpdate)
    user = get_storage().update_user(
        current_user().id,
        profile_completed=True,
        **data.model_dump(exclude_unset=True),
    )
    log.info("User %s completed their profile", user.id)
    return jsonify(UserOut.model_validate(user).dump())
