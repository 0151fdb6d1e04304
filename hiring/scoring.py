"""Automatic candidate scoring.

``compute_auto_score`` turns an application, its job and the candidate's
profile into five bounded factors whose sum is the 0-100 auto score.
Absent information scores a neutral value; values that are present but
cannot be interpreted score 0 for that factor. Nothing here raises.
"""
from __future__ import annotations

import math
import re
from dataclasses import asdict, dataclass
from datetime import date, datetime

from hiring.log import get_logger

log = get_logger(__name__)

MAX_EXPERIENCE = 25
MAX_SKILLS = 30
MAX_AVAILABILITY = 15
MAX_SALARY = 15
MAX_QUALITY = 15

LEVEL_RANKS: dict[str, int] = {
    "débutant": 1,
    "intermédiaire": 2,
    "senior": 3,
}
_DEFAULT_RANK = 2

_K_AMOUNT = re.compile(r"(\d+)\s*k", re.IGNORECASE)
_K_RANGE = re.compile(r"(\d+)\s*k\s*-\s*(\d+)\s*k", re.IGNORECASE)
_PLAIN_AMOUNT = re.compile(r"\d[\d\s.,]*")
_CENTS = re.compile(r"[.,]\d{1,2}$")


@dataclass(frozen=True)
class ScoreFactors:
    experience_match: int = 0
    skills_match: int = 0
    availability_score: int = 0
    salary_fit: int = 0
    application_quality: int = 0

    @property
    def total(self) -> int:
        return (
            self.experience_match + self.skills_match + self.availability_score
            + self.salary_fit + self.application_quality
        )

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class AutoScore:
    factors: ScoreFactors
    score: int


def round_half_up(value: float) -> int:
    # float noise such as 44.99999999 must not flip the rounding
    return int(math.floor(round(value, 9) + 0.5))


def _clamp(value: int, maximum: int) -> int:
    return max(0, min(int(value), maximum))


def _rank(level: str) -> int:
    return LEVEL_RANKS.get(level.strip().lower(), _DEFAULT_RANK)


def experience_match(job_level, candidate_level) -> int:
    if not job_level or not candidate_level:
        return 10
    if not isinstance(job_level, str) or not isinstance(candidate_level, str):
        return 0
    job_rank, cand_rank = _rank(job_level), _rank(candidate_level)
    if cand_rank >= job_rank:
        return 25
    if cand_rank == job_rank - 1:
        return 15
    return 5


def skills_match(job_skills, candidate_skills) -> int:
    if not job_skills or not candidate_skills:
        return 15
    if not isinstance(job_skills, (list, tuple)) or not isinstance(candidate_skills, (list, tuple)):
        log.debug("Unusable skills lists: %r / %r", job_skills, candidate_skills)
        return 0

    wanted = [s.strip().lower() for s in job_skills if isinstance(s, str) and s.strip()]
    offered = [s.strip().lower() for s in candidate_skills if isinstance(s, str) and s.strip()]
    if not wanted:
        return 15
    matched = [w for w in wanted if any(w in o or o in w for o in offered)]
    return round_half_up(len(matched) / len(wanted) * MAX_SKILLS)


def _as_date(value) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip()).date()
        except ValueError:
            return None
    return None


def availability_score(availability, today: date) -> int:
    if availability is None or availability == "":
        return 12
    when = _as_date(availability)
    if when is None:
        log.debug("Unparseable availability date: %r", availability)
        return 0
    days = (when - today).days
    if days <= 0:
        return 15
    if days <= 30:
        return 12
    if days <= 60:
        return 8
    return 3


def parse_amount(text: str) -> int | None:
    """Read a salary figure such as ``"45k"`` or ``"45 000 €"``."""
    m = _K_AMOUNT.search(text)
    if m:
        return int(m.group(1)) * 1000
    m = _PLAIN_AMOUNT.search(text)
    if m:
        # "45 000,00" and "45000.50": drop the cents
        figure = _CENTS.sub("", m.group(0).rstrip())
        digits = re.sub(r"\D", "", figure)
        if digits:
            return int(digits)
    return None


def salary_fit(expectation, job_salary) -> int:
    if not expectation or not job_salary:
        return 10
    if not isinstance(expectation, str) or not isinstance(job_salary, str):
        return 0

    wanted = parse_amount(expectation)
    if wanted is None:
        log.debug("Unparseable salary expectation: %r", expectation)
        return 0

    m = _K_RANGE.search(job_salary)
    if not m:
        return 8
    low, high = int(m.group(1)) * 1000, int(m.group(2)) * 1000
    if low <= wanted <= high:
        return 15
    if wanted <= high * 1.1:
        return 10
    return 3


def application_quality(application, candidate=None) -> int:
    score = 0
    cover = getattr(application, "cover_letter", None)
    if isinstance(cover, str) and len(cover) > 100:
        score += 5
    if getattr(application, "cv_path", None):
        score += 5
    if getattr(application, "motivation_letter_path", None):
        score += 3
    if getattr(application, "phone", None) or getattr(candidate, "phone", None):
        score += 2
    return score


def compute_auto_score(application, job, candidate=None, today: date | None = None) -> AutoScore:
    today = today or date.today()
    factors = ScoreFactors(
        experience_match=_clamp(
            experience_match(getattr(job, "experience_level", None),
                             getattr(candidate, "experience_level", None)),
            MAX_EXPERIENCE,
        ),
        skills_match=_clamp(
            skills_match(getattr(job, "skills", None), getattr(candidate, "skills", None)),
            MAX_SKILLS,
        ),
        availability_score=_clamp(
            availability_score(getattr(application, "availability_date", None), today),
            MAX_AVAILABILITY,
        ),
        salary_fit=_clamp(
            salary_fit(getattr(application, "salary_expectation", None),
                       getattr(job, "salary", None)),
            MAX_SALARY,
        ),
        application_quality=_clamp(application_quality(application, candidate), MAX_QUALITY),
    )
    return AutoScore(factors=factors, score=min(factors.total, 100))


def blend(auto_score: int, manual_score: int | None, auto_weight: float = 0.6) -> int:
    """Total score: the auto score alone until a recruiter has scored."""
    if manual_score is None:
        return auto_score
    return round_half_up(auto_score * auto_weight + manual_score * (1 - auto_weight))
