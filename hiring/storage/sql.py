from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Sequence

from sqlalchemy import or_, text
from sqlalchemy.exc import IntegrityError

from hiring.db import db
from hiring.errors import ConflictError
from hiring.models import Application, Job, User
from hiring.storage.base import Storage


class SqlStorage(Storage):
    """Flask-SQLAlchemy backed storage; needs an application context."""

    name = "sql"

    def ping(self) -> None:
        db.session.execute(text("SELECT 1"))

    def _save(self, row):
        db.session.add(row)
        db.session.commit()
        return row

    def _update(self, row, fields: dict):
        if row is None:
            return None
        for key, value in fields.items():
            setattr(row, key, value)
        if hasattr(row, "updated_at"):
            row.updated_at = datetime.utcnow()
        db.session.commit()
        return row

    # users
    def get_user(self, user_id: int) -> Optional[User]:
        return db.session.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return User.query.filter_by(email=email).first()

    def create_user(self, **fields) -> User:
        return self._save(User(**fields))

    def update_user(self, user_id: int, **fields) -> Optional[User]:
        return self._update(self.get_user(user_id), fields)

    def list_users_by_role(self, roles: Iterable[str]) -> list[User]:
        return User.query.filter(User.role.in_(list(roles))).order_by(User.id).all()

    # jobs
    def get_job(self, job_id: int) -> Optional[Job]:
        return db.session.get(Job, job_id)

    def list_jobs(
        self,
        active_only: bool = True,
        search: Optional[str] = None,
        contract_types: Sequence[str] = (),
        experience_levels: Sequence[str] = (),
        location: Optional[str] = None,
    ) -> list[Job]:
        q = Job.query
        if active_only:
            q = q.filter(Job.is_active.is_(True))
        if search:
            like = f"%{search}%"
            q = q.filter(or_(
                Job.title.ilike(like),
                Job.company.ilike(like),
                Job.location.ilike(like),
                Job.description.ilike(like),
            ))
        if contract_types:
            q = q.filter(Job.contract_type.in_(list(contract_types)))
        if experience_levels:
            q = q.filter(Job.experience_level.in_(list(experience_levels)))
        if location:
            q = q.filter(Job.location.ilike(f"%{location}%"))
        return q.order_by(Job.created_at.desc(), Job.id.desc()).all()

    def create_job(self, **fields) -> Job:
        return self._save(Job(**fields))

    def update_job(self, job_id: int, **fields) -> Optional[Job]:
        return self._update(self.get_job(job_id), fields)

    # applications
    def get_application(self, application_id: int) -> Optional[Application]:
        return db.session.get(Application, application_id)

    def find_application(self, user_id: int, job_id: int) -> Optional[Application]:
        return Application.query.filter_by(user_id=user_id, job_id=job_id).first()

    def create_application(self, **fields) -> Application:
        try:
            return self._save(Application(**fields))
        except IntegrityError:
            db.session.rollback()
            if self.find_application(fields.get("user_id"), fields.get("job_id")) is None:
                raise
            raise ConflictError("You have already applied to this job")

    def update_application(self, application_id: int, **fields) -> Optional[Application]:
        return self._update(self.get_application(application_id), fields)

    def list_applications_for_job(self, job_id: int) -> list[Application]:
        return (
            Application.query.filter_by(job_id=job_id)
            .order_by(Application.created_at.asc(), Application.id.asc())
            .all()
        )

    def list_applications_by_user(self, user_id: int) -> list[Application]:
        return (
            Application.query.filter_by(user_id=user_id)
            .order_by(Application.created_at.desc(), Application.id.desc())
            .all()
        )

    def list_applications_by_recruiter(self, recruiter_id: int) -> list[Application]:
        return (
            Application.query.filter_by(assigned_recruiter=recruiter_id)
            .order_by(Application.created_at.desc(), Application.id.desc())
            .all()
        )
