from datetime import date

import pytest

from app import create_app
from hiring.storage import get_storage

SCORING_DATE = date(2026, 1, 15)


def base_config(**extra):
    cfg = {
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "STORAGE_BACKEND": "sql",
        "STORAGE_FALLBACK": False,
        "AUTO_CREATE_TABLES": True,
        "ADMIN_EMAIL": "",
        "ADMIN_PASSWORD": "",
        "LOG_LEVEL": "WARNING",
        "SCORING_DATE": SCORING_DATE,
    }
    cfg.update(extra)
    return cfg


@pytest.fixture(params=["sql", "memory"])
def app(request):
    return create_app(base_config(STORAGE_BACKEND=request.param))


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make(email, role="candidate", **profile):
        with app.app_context():
            return get_storage().create_user(email=email, role=role, **profile).id
    return _make


@pytest.fixture
def make_job(app):
    def _make(**fields):
        values = {
            "title": "Backend Engineer",
            "company": "Acme",
            "location": "Dakar",
            "description": "Build and run our APIs.",
            "contract_type": "CDI",
            "experience_level": "Intermédiaire",
            "salary": "40k - 55k €",
            "skills": ["Python", "SQL"],
            "is_active": True,
        }
        values.update(fields)
        with app.app_context():
            return get_storage().create_job(**values).id
    return _make


@pytest.fixture
def make_application(app):
    def _make(user_id, job_id, **fields):
        fields.setdefault("status", "pending")
        with app.app_context():
            return get_storage().create_application(user_id=user_id, job_id=job_id, **fields).id
    return _make


@pytest.fixture
def read_application(app):
    def _read(application_id):
        with app.app_context():
            row = get_storage().get_application(application_id)
            return {
                "status": row.status,
                "assigned_recruiter": row.assigned_recruiter,
                "auto_score": row.auto_score,
                "manual_score": row.manual_score,
                "score_notes": row.score_notes,
            }
    return _read


@pytest.fixture
def login():
    def _login(client, user_id):
        with client.session_transaction() as sess:
            sess["user_id"] = user_id
    return _login
