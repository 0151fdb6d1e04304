from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Optional, Sequence

from hiring.models import Application, Job, User


class Storage(ABC):
    """Persistence operations used by the services and views.

    Records are the ``hiring.models`` classes; the in-memory implementation
    keeps transient instances of the same classes.
    """

    name = "abstract"

    def ping(self) -> None:
        """Raise if the backing store cannot be reached."""

    # users
    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]: ...

    @abstractmethod
    def create_user(self, **fields) -> User: ...

    @abstractmethod
    def update_user(self, user_id: int, **fields) -> Optional[User]: ...

    @abstractmethod
    def list_users_by_role(self, roles: Iterable[str]) -> list[User]: ...

    # jobs
    @abstractmethod
    def get_job(self, job_id: int) -> Optional[Job]: ...

    @abstractmethod
    def list_jobs(
        self,
        active_only: bool = True,
        search: Optional[str] = None,
        contract_types: Sequence[str] = (),
        experience_levels: Sequence[str] = (),
        location: Optional[str] = None,
    ) -> list[Job]: ...

    @abstractmethod
    def create_job(self, **fields) -> Job: ...

    @abstractmethod
    def update_job(self, job_id: int, **fields) -> Optional[Job]: ...

    # applications
    @abstractmethod
    def get_application(self, application_id: int) -> Optional[Application]: ...

    @abstractmethod
    def find_application(self, user_id: int, job_id: int) -> Optional[Application]: ...

    @abstractmethod
    def create_application(self, **fields) -> Application:
        """Raises ``ConflictError`` when the user already applied to the job."""

    @abstractmethod
    def update_application(self, application_id: int, **fields) -> Optional[Application]: ...

    @abstractmethod
    def list_applications_for_job(self, job_id: int) -> list[Application]:
        """Oldest first."""

    @abstractmethod
    def list_applications_by_user(self, user_id: int) -> list[Application]:
        """Newest first."""

    @abstractmethod
    def list_applications_by_recruiter(self, recruiter_id: int) -> list[Application]:
        """Newest first."""


def job_matches(
    job: Job,
    search: Optional[str],
    contract_types: Sequence[str],
    experience_levels: Sequence[str],
    location: Optional[str],
) -> bool:
    if search:
        needle = search.lower()
        haystack = " ".join(
            (job.title or "", job.company or "", job.location or "", job.description or "")
        ).lower()
        if needle not in haystack:
            return False
    if contract_types and job.contract_type not in contract_types:
        return False
    if experience_levels and job.experience_level not in experience_levels:
        return False
    if location and location.lower() not in (job.location or "").lower():
        return False
    return True
