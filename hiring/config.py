import os

from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "1") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def database_url() -> str:
    url = os.getenv("DATABASE_URL") or "sqlite:///local.db"
    # Heroku-style URLs are not accepted by SQLAlchemy 1.4+
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


class Config:
    SECRET_KEY = os.getenv("FLASK_SECRET_KEY", "dev-secret")

    SQLALCHEMY_DATABASE_URI = database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # "sql" or "memory"
    STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "sql").strip().lower()
    STORAGE_FALLBACK = _flag("STORAGE_FALLBACK")
    AUTO_CREATE_TABLES = _flag("AUTO_CREATE_TABLES")

    RANKING_LIMIT = int(os.getenv("RANKING_LIMIT", "10"))
    FINAL_LIMIT = int(os.getenv("FINAL_LIMIT", "3"))
    AUTO_SCORE_WEIGHT = float(os.getenv("AUTO_SCORE_WEIGHT", "0.6"))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "").strip().lower()
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "").strip()
