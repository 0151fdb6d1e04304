"""
Request/response schemas for the JSON API.

Field names are snake_case in Python and camelCase on the wire
(``applicationId``, ``autoScore``...). Requests are validated with
``hiring.errors.parse_body``; responses are rendered with ``dump``.
"""
from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator
from pydantic.alias_generators import to_camel

ContractType = Literal["CDI", "CDD", "Freelance"]
ExperienceLevel = Literal["Débutant", "Intermédiaire", "Senior"]
ApplicationStatus = Literal[
    "pending", "reviewed", "interview", "accepted", "rejected", "assigned", "scored"
]


class Schema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def dump(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


# ---------- requests ----------

class RegisterRequest(Schema):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    experience_level: Optional[ExperienceLevel] = None
    skills: List[str] = Field(default_factory=list)


class LoginRequest(Schema):
    email: str
    password: str


class ProfileUpdate(Schema):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    experience_level: Optional[ExperienceLevel] = None
    skills: Optional[List[str]] = None


class JobCreate(Schema):
    title: str = Field(..., min_length=1)
    company: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    requirements: Optional[str] = None
    salary: Optional[str] = Field(None, description='Range such as "40k - 55k €"')
    contract_type: ContractType
    experience_level: Optional[ExperienceLevel] = None
    skills: List[str] = Field(default_factory=list)
    is_active: bool = True


class JobUpdate(Schema):
    title: Optional[str] = Field(None, min_length=1)
    company: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    requirements: Optional[str] = None
    salary: Optional[str] = None
    contract_type: Optional[ContractType] = None
    experience_level: Optional[ExperienceLevel] = None
    skills: Optional[List[str]] = None
    is_active: Optional[bool] = None

    # omitted means unchanged; these columns cannot be cleared
    @field_validator("title", "company", "location", "description", "contract_type", "is_active")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class ApplicationCreate(Schema):
    job_id: int
    phone: Optional[str] = None
    cover_letter: Optional[str] = None
    cv_path: Optional[str] = Field(None, description="Stored document reference")
    motivation_letter_path: Optional[str] = None
    availability_date: Optional[date] = None
    salary_expectation: Optional[str] = None


class AssignRequest(Schema):
    application_ids: List[int] = Field(default_factory=list)
    recruiter_id: Optional[int] = None


class ScoreRequest(Schema):
    score: StrictInt = Field(..., ge=0, le=100)
    notes: Optional[str] = Field(None, max_length=5000)


class StatusUpdate(Schema):
    status: ApplicationStatus


# ---------- responses ----------

class UserOut(Schema):
    id: int
    email: str
    role: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    experience_level: Optional[str] = None
    skills: Optional[List[str]] = None
    profile_completed: bool = False


class JobOut(Schema):
    id: int
    title: str
    company: str
    location: str
    description: str
    requirements: Optional[str] = None
    salary: Optional[str] = None
    contract_type: str
    experience_level: Optional[str] = None
    skills: Optional[List[str]] = None
    is_active: bool = True
    created_at: Optional[datetime] = None


class ApplicationOut(Schema):
    id: int
    user_id: int
    job_id: int
    status: str
    phone: Optional[str] = None
    cover_letter: Optional[str] = None
    cv_path: Optional[str] = None
    motivation_letter_path: Optional[str] = None
    availability_date: Optional[date] = None
    salary_expectation: Optional[str] = None
    assigned_recruiter: Optional[int] = None
    auto_score: Optional[int] = None
    manual_score: Optional[int] = None
    score_notes: Optional[str] = None
    created_at: Optional[datetime] = None


class ApplicationDetail(ApplicationOut):
    candidate: Optional[UserOut] = None
    job: Optional[JobOut] = None


class ScoreFactorsOut(Schema):
    experience_match: int
    skills_match: int
    availability_score: int
    salary_fit: int
    application_quality: int


class CandidateScore(Schema):
    application_id: int
    candidate: Optional[UserOut] = None
    job: JobOut
    auto_score: int
    manual_score: Optional[int] = None
    total_score: int
    factors: ScoreFactorsOut


class AssignmentResult(Schema):
    success: bool = True
    assigned: int
    job_ids: List[int]
