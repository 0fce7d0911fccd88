# Overview: Service-layer operations for accounts; registration and credential checks.

"""
Account Service

Each account owns exactly one inventory. Registration mints the tenant
identifier (inventoryId) that scopes every other record.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor from BCRYPT_ROUNDS, default 12)
- Email is trimmed and lower-cased, so uniqueness is case-insensitive
- Login failures do not reveal whether the email exists
"""

import bcrypt
from flask import current_app

from ..extensions import db
from ..models import User
from ..validation import ConflictError, UnauthorizedError, ValidationError
from .concurrency import commit_new_record
from .identifier_service import generate_tenant_id
from ..time_utils import utcnow


def normalize_email(email: str) -> str:
    return str(email or "").strip().lower()


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt.

    WHY: credentials must never be stored or compared in plain text.
    """
    rounds = current_app.config.get("BCRYPT_ROUNDS", 12)
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    Returns True if password matches hash, False otherwise.
    bcrypt.checkpw() is timing-safe.
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        # Malformed hash in storage
        return False


def find_user_by_email(email: str) -> User | None:
    return db.session.query(User).filter(User.email == normalize_email(email)).first()


def register(email: str, password: str) -> User:
    """
    Create an account and mint its inventory id.

    Raises:
        ValidationError: missing email or password
        ConflictError: email already registered (any letter case)
    """
    email = normalize_email(email)
    if not email or not isinstance(password, str) or not password:
        raise ValidationError("Please provide both email and password")

    # bcrypt only looks at the first 72 bytes
    if len(password.encode('utf-8')) > 72:
        raise ValidationError("Password must be at most 72 bytes")

    if find_user_by_email(email):
        raise ConflictError("User already exists")

    now = utcnow()
    user = User(
        email=email,
        password_hash=hash_password(password),
        inventory_id=generate_tenant_id(),
        created_at=now,
        updated_at=now,
    )
    db.session.add(user)
    commit_new_record("account")
    return user


def authenticate(email: str, password: str) -> User:
    """
    Check credentials; password comparison is exact (case-sensitive).

    Raises:
        ValidationError: missing email or password
        UnauthorizedError: unknown email or wrong password
    """
    if not email or not isinstance(password, str) or not password:
        raise ValidationError("Please provide both email and password")

    user = find_user_by_email(email)
    if user is None or not verify_password(password, user.password_hash):
        raise UnauthorizedError("Invalid credentials")
    return user


def list_users() -> list[User]:
    return db.session.query(User).order_by(User.created_at.asc(), User.id.asc()).all()
