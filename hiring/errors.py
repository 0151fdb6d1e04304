from flask import jsonify, request
from pydantic import ValidationError as SchemaError
from werkzeug.exceptions import HTTPException

from hiring.log import get_logger

log = get_logger(__name__)


class HiringError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(HiringError):
    status_code = 400


class AuthenticationError(HiringError):
    status_code = 401


class AuthorizationError(HiringError):
    status_code = 403


class NotFoundError(HiringError):
    status_code = 404


class ConflictError(HiringError):
    status_code = 409


def _schema_message(exc: SchemaError) -> str:
    parts = []
    for err in exc.errors():
        where = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{where}: {err.get('msg')}" if where else err.get("msg", "invalid"))
    return "; ".join(parts) or "Invalid request body"

def parse_body(schema):
    """Validate the JSON request body against ``schema``.

    Only request payloads are reported as client errors; a schema failing
    while a response is rendered falls through to the 500 handler.
    """
    try:
        return schema.model_validate(request.get_json(silent=True) or {})
    except SchemaError as exc:
        raise ValidationError(_schema_message(exc)) from exc


def register_error_handlers(app):
    @app.errorhandler(HiringError)
    def handle_hiring_error(exc: HiringError):
        if exc.status_code >= 500:
            log.error("Request failed: %s", exc.message)
        return jsonify({"message": exc.message}), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return jsonify({"message": exc.description}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        log.exception("Unhandled error")
        return jsonify({"message": "Internal server error"}), 500
