from __future__ import annotations

import itertools
from datetime import datetime
from typing import Iterable, Optional, Sequence

from hiring.errors import ConflictError
from hiring.models import Application, Job, User
from hiring.storage.base import Storage, job_matches


def _column_defaults(model) -> dict:
    out = {}
    for col in model.__table__.columns:
        if col.default is not None and col.default.is_scalar:
            out[col.name] = col.default.arg
    return out


class MemoryStorage(Storage):
    """Non-durable, single-process store.

    Used when no database is configured or the database is unreachable.
    Holds transient model instances; nothing survives a restart.
    """

    name = "memory"

    def __init__(self):
        self.users: dict[int, User] = {}
        self.jobs: dict[int, Job] = {}
        self.applications: dict[int, Application] = {}
        self._ids = {User: itertools.count(1), Job: itertools.count(1), Application: itertools.count(1)}

    def _new(self, model, table: dict, fields: dict):
        now = datetime.utcnow()
        values = _column_defaults(model)
        values.update(created_at=now)
        if "updated_at" in model.__table__.columns:
            values["updated_at"] = now
        values.update(fields)
        row = model(**values)
        row.id = next(self._ids[model])
        table[row.id] = row
        return row

    @staticmethod
    def _update(row, fields: dict):
        if row is None:
            return None
        for key, value in fields.items():
            setattr(row, key, value)
        if "updated_at" in type(row).__table__.columns:
            row.updated_at = datetime.utcnow()
        return row

    # users
    def get_user(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.email == email), None)

    def create_user(self, **fields) -> User:
        return self._new(User, self.users, fields)

    def update_user(self, user_id: int, **fields) -> Optional[User]:
        return self._update(self.get_user(user_id), fields)

    def list_users_by_role(self, roles: Iterable[str]) -> list[User]:
        wanted = set(roles)
        return [u for u in self.users.values() if u.role in wanted]

    # jobs
    def get_job(self, job_id: int) -> Optional[Job]:
        return self.jobs.get(job_id)

    def list_jobs(
        self,
        active_only: bool = True,
        search: Optional[str] = None,
        contract_types: Sequence[str] = (),
        experience_levels: Sequence[str] = (),
        location: Optional[str] = None,
    ) -> list[Job]:
        jobs = [
            j for j in self.jobs.values()
            if (j.is_active or not active_only)
            and job_matches(j, search, contract_types, experience_levels, location)
        ]
        return sorted(jobs, key=lambda j: (j.created_at, j.id), reverse=True)

    def create_job(self, **fields) -> Job:
        return self._new(Job, self.jobs, fields)

    def update_job(self, job_id: int, **fields) -> Optional[Job]:
        return self._update(self.get_job(job_id), fields)

    # applications
    def get_application(self, application_id: int) -> Optional[Application]:
        return self.applications.get(application_id)

    def find_application(self, user_id: int, job_id: int) -> Optional[Application]:
        return next(
            (a for a in self.applications.values() if a.user_id == user_id and a.job_id == job_id),
            None,
        )

    def create_application(self, **fields) -> Application:
        if self.find_application(fields.get("user_id"), fields.get("job_id")):
            raise ConflictError("You have already applied to this job")
        return self._new(Application, self.applications, fields)

    def update_application(self, application_id: int, **fields) -> Optional[Application]:
        return self._update(self.get_application(application_id), fields)

    def list_applications_for_job(self, job_id: int) -> list[Application]:
        apps = [a for a in self.applications.values() if a.job_id == job_id]
        return sorted(apps, key=lambda a: (a.created_at, a.id))

    def list_applications_by_user(self, user_id: int) -> list[Application]:
        apps = [a for a in self.applications.values() if a.user_id == user_id]
        return sorted(apps, key=lambda a: (a.created_at, a.id), reverse=True)

    def list_applications_by_recruiter(self, recruiter_id: int) -> list[Application]:
        apps = [a for a in self.applications.values() if a.assigned_recruiter == recruiter_id]
        return sorted(apps, key=lambda a: (a.created_at, a.id), reverse=True)
