from flask import Flask
from sqlalchemy.exc import OperationalError

from hiring.admin import admin_bp, recruiter_bp
from hiring.auth import auth_bp, ensure_admin_seed
from hiring.config import Config
from hiring.db import db, init_db
from hiring.errors import register_error_handlers
from hiring.log import configure_logging, get_logger
from hiring.storage import EXTENSION_KEY, MemoryStorage, SqlStorage, Storage
from hiring.views import api_bp

log = get_logger("hiring.app")


def _select_storage(app: Flask) -> Storage:
    if app.config["STORAGE_BACKEND"] == "memory":
        return MemoryStorage()

    storage = SqlStorage()
    try:
        with app.app_context():
            if app.config["AUTO_CREATE_TABLES"]:
                db.create_all()
            storage.ping()
    except OperationalError as exc:
        if not app.config["STORAGE_FALLBACK"]:
            raise
        log.warning("Database unreachable (%s); using in-memory storage", exc.orig)
        return MemoryStorage()
    return storage


def create_app(overrides=None, storage: Storage = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    configure_logging(app.config["LOG_LEVEL"])

    # ✅ DB URI is final here; initialize SQLAlchemy + Migrate
    init_db(app)

    if storage is None:
        storage = _select_storage(app)
    app.extensions[EXTENSION_KEY] = storage
    log.info("Using %s storage", storage.name)

    register_error_handlers(app)
    app.register_blueprint(auth_bp)
    app.register_blueprint(api_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(recruiter_bp)

    @app.get("/api/health")
    def health():
        return {"ok": True, "storage": storage.name}

    with app.app_context():
        ensure_admin_seed()

    return app


if __name__ == "__main__":
    create_app().run(debug=True)
