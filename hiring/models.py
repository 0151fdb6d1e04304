from datetime import datetime
from .db import db

CANDIDATE = "candidate"
RECRUITER = "recruiter"
HR = "hr"
ADMIN = "admin"

STAFF_ROLES = (RECRUITER, HR, ADMIN)


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=True)
    role = db.Column(db.String(20), default=CANDIDATE, nullable=False)

    # profile
    first_name = db.Column(db.String(120), nullable=True)
    last_name = db.Column(db.String(120), nullable=True)
    phone = db.Column(db.String(40), nullable=True)
    experience_level = db.Column(db.String(40), nullable=True)
    skills = db.Column(db.JSON, nullable=True)
    profile_completed = db.Column(db.Boolean, default=False, nullable=False)

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN


class Job(db.Model):
    __tablename__ = "jobs"

    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    title = db.Column(db.String(255), nullable=False)
    company = db.Column(db.String(255), nullable=False)
    location = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    requirements = db.Column(db.Text, nullable=True)
    salary = db.Column(db.String(120), nullable=True)  # e.g. "40k - 55k €"
    contract_type = db.Column(db.String(20), nullable=False)
    experience_level = db.Column(db.String(40), nullable=True)
    skills = db.Column(db.JSON, nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)


class Application(db.Model):
    __tablename__ = "applications"
    __table_args__ = (db.UniqueConstraint("user_id", "job_id"),)

    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    job_id = db.Column(db.Integer, db.ForeignKey("jobs.id"), nullable=False, index=True)
    status = db.Column(db.String(20), default="pending", nullable=False)

    # submission
    phone = db.Column(db.String(40), nullable=True)
    cover_letter = db.Column(db.Text, nullable=True)
    cv_path = db.Column(db.Text, nullable=True)
    motivation_letter_path = db.Column(db.Text, nullable=True)
    availability_date = db.Column(db.Date, nullable=True)
    salary_expectation = db.Column(db.String(120), nullable=True)

    # scoring
    assigned_recruiter = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)
    auto_score = db.Column(db.Integer, nullable=True)
    manual_score = db.Column(db.Integer, nullable=True)
    score_notes = db.Column(db.Text, nullable=True)
