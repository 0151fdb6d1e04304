from functools import wraps

from flask import Blueprint, current_app, g, jsonify, session
from passlib.hash import pbkdf2_sha256
from sqlalchemy.exc import OperationalError

from hiring.errors import AuthenticationError, AuthorizationError, ConflictError, parse_body
from hiring.log import get_logger
from hiring.models import ADMIN, CANDIDATE
from hiring.schemas import LoginRequest, RegisterRequest, UserOut
from hiring.storage import get_storage

log = get_logger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def current_user():
    if "current_user" not in g:
        uid = session.get("user_id")
        g.current_user = get_storage().get_user(uid) if uid else None
    return g.current_user


def login_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        if current_user() is None:
            raise AuthenticationError("Please log in to continue.")
        return view(*args, **kwargs)
    return wrapped


def staff_required(view):
    """Recruiter, HR and admin accounts only."""
    @wraps(view)
    def wrapped(*args, **kwargs):
        user = current_user()
        if user is None:
            raise AuthenticationError("Please log in to continue.")
        if not user.is_staff:
            raise AuthorizationError("Access denied")
        return view(*args, **kwargs)
    return wrapped


def create_user(email: str, password: str, role: str = CANDIDATE, **profile):
    storage = get_storage()
    email = email.strip().lower()
    if storage.get_user_by_email(email):
        raise ConflictError("Email already registered.")

    return storage.create_user(
        email=email,
        password_hash=pbkdf2_sha256.hash(password),
        role=role,
        **profile,
    )


def authenticate(email: str, password: str):
    email = email.strip().lower()
    user = get_storage().get_user_by_email(email)
    if not user or not user.password_hash:
        return None
    if not pbkdf2_sha256.verify(password, user.password_hash):
        return None
    return user


def ensure_admin_seed():
    """
    Creates/ensures an admin user from config:
      ADMIN_EMAIL, ADMIN_PASSWORD
    """
    admin_email = current_app.config.get("ADMIN_EMAIL", "")
    admin_password = current_app.config.get("ADMIN_PASSWORD", "")
    if not admin_email or not admin_password:
        return

    storage = get_storage()
    try:
        user = storage.get_user_by_email(admin_email)
        if user:
            if not user.is_admin:
                storage.update_user(user.id, role=ADMIN)
                log.info("Promoted %s to admin", admin_email)
            return

        create_user(admin_email, admin_password, role=ADMIN)
        log.info("Seeded admin account %s", admin_email)
    except OperationalError:
        # users table doesn't exist yet (migrations not applied)
        log.warning("Skipping admin seed: users table is missing")


@auth_bp.post("/register")
def register():
    data = parse_body(RegisterRequest)
    user = create_user(
        data.email,
        data.password,
        first_name=data.first_name,
        last_name=data.last_name,
        phone=data.phone,
        experience_level=data.experience_level,
        skills=data.skills,
    )
    session["user_id"] = user.id
    return jsonify(UserOut.model_validate(user).dump()), 201


@auth_bp.post("/login")
def login():
    data = parse_body(LoginRequest)
    user = authenticate(data.email, data.password)
    if user is None:
        raise AuthenticationError("Invalid email or password.")
    session.clear()
    session["user_id"] = user.id
    return jsonify(UserOut.model_validate(user).dump())


@auth_bp.post("/logout")
def logout():
    session.clear()
    return jsonify({"success": True})


@auth_bp.get("/user")
@login_required
def me():
    return jsonify(UserOut.model_validate(current_user()).dump())
