"""Candidate ranking, recruiter assignment and manual scoring."""
from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from hiring.errors import AuthorizationError, NotFoundError, ValidationError
from hiring.log import get_logger
from hiring.models import STAFF_ROLES, Application, User
from hiring.schemas import CandidateScore, JobOut, ScoreFactorsOut, UserOut
from hiring.scoring import ScoreFactors, blend, compute_auto_score
from hiring.storage import Storage

log = get_logger(__name__)


def _ranking_key(entry: tuple[CandidateScore, Application]):
    scored, app = entry
    return (-scored.total_score, app.created_at, app.id)


class RecruitmentService:
    def __init__(
        self,
        storage: Storage,
        auto_weight: float = 0.6,
        ranking_limit: int = 10,
        final_limit: int = 3,
        today: Optional[date] = None,
    ):
        self.storage = storage
        self.auto_weight = auto_weight
        self.ranking_limit = ranking_limit
        self.final_limit = final_limit
        self.today = today

    def _score(self, app: Application, job, candidate, auto_score: int, factors: ScoreFactors) -> CandidateScore:
        return CandidateScore(
            application_id=app.id,
            candidate=UserOut.model_validate(candidate) if candidate else None,
            job=JobOut.model_validate(job),
            auto_score=auto_score,
            manual_score=app.manual_score,
            total_score=blend(auto_score, app.manual_score, self.auto_weight),
            factors=ScoreFactorsOut.model_validate(factors),
        )

    @staticmethod
    def _ranked(entries: list[tuple[CandidateScore, Application]], limit: int) -> list[CandidateScore]:
        entries.sort(key=_ranking_key)
        return [scored for scored, _ in entries[:limit]]

    def get_top_candidates(self, job_id: int, limit: Optional[int] = None) -> list[CandidateScore]:
        """Score every application for the job and return the best ``limit``.

        The auto score is recomputed on each call and written back when it
        differs from the stored value. Unknown jobs yield an empty list.
        """
        job = self.storage.get_job(job_id)
        if job is None:
            log.info("Ranking requested for unknown job %s", job_id)
            return []

        entries = []
        for app in self.storage.list_applications_for_job(job_id):
            candidate = self.storage.get_user(app.user_id)
            result = compute_auto_score(app, job, candidate, today=self.today)
            if app.auto_score != result.score:
                self.storage.update_application(app.id, auto_score=result.score)
            entries.append((self._score(app, job, candidate, result.score, result.factors), app))

        ranked = self._ranked(entries, limit or self.ranking_limit)
        log.debug("Ranked %d applications for job %s", len(entries), job_id)
        return ranked

    def get_final_top3(self, job_id: int) -> list[CandidateScore]:
        """Best manually scored applications for the job, by blended score.

        Read only: the auto score is recomputed but never written back.
        """
        job = self.storage.get_job(job_id)
        if job is None:
            return []

        entries = []
        for app in self.storage.list_applications_for_job(job_id):
            if app.manual_score is None:
                continue
            candidate = self.storage.get_user(app.user_id)
            result = compute_auto_score(app, job, candidate, today=self.today)
            entries.append((self._score(app, job, candidate, result.score, result.factors), app))

        return self._ranked(entries, self.final_limit)

    def get_recruiters(self) -> list[User]:
        return self.storage.list_users_by_role(STAFF_ROLES)

    def assign_candidates(self, application_ids: Iterable[int], recruiter_id: Optional[int]) -> dict:
        ids = list(dict.fromkeys(application_ids or []))
        if not ids:
            raise ValidationError("Select at least one candidate to assign")
        if recruiter_id is None:
            raise ValidationError("A recruiter must be selected")

        recruiter = self.storage.get_user(recruiter_id)
        if recruiter is None or not recruiter.is_staff:
            raise ValidationError(f"User {recruiter_id} is not a recruiter")

        apps = []
        for app_id in ids:
            app = self.storage.get_application(app_id)
            if app is None:
                raise NotFoundError(f"Application {app_id} not found")
            apps.append(app)

        for app in apps:
            self.storage.update_application(app.id, assigned_recruiter=recruiter.id, status="assigned")

        job_ids = sorted({app.job_id for app in apps})
        log.info("Assigned %d applications to recruiter %s", len(apps), recruiter.id)
        return {"success": True, "assigned": len(apps), "job_ids": job_ids}

    def get_assigned_applications(self, recruiter_id: int) -> list[dict]:
        out = []
        for app in self.storage.list_applications_by_recruiter(recruiter_id):
            out.append({
                "application": app,
                "candidate": self.storage.get_user(app.user_id),
                "job": self.storage.get_job(app.job_id),
            })
        return out

    def update_manual_score(
        self,
        application_id: int,
        recruiter: User,
        score: int,
        notes: Optional[str] = None,
    ) -> Application:
        """Record a recruiter's score, replacing any earlier one."""
        if isinstance(score, bool) or not isinstance(score, int) or not 0 <= score <= 100:
            raise ValidationError("Score must be an integer between 0 and 100")

        app = self.storage.get_application(application_id)
        if app is None:
            raise NotFoundError(f"Application {application_id} not found")
        if app.assigned_recruiter != recruiter.id:
            raise AuthorizationError("This application is not assigned to you")

        updated = self.storage.update_application(
            application_id, manual_score=score, score_notes=notes, status="scored"
        )
        log.info("Recruiter %s scored application %s: %d", recruiter.id, application_id, score)
        return updated
