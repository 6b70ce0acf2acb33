"""Security utilities: password hashing and session tokens."""

import secrets

from passlib.context import CryptContext

from app.core.config import get_settings
from app.core.errors import ValidationError

settings = get_settings()

# ── Password hashing (Argon2) ────────────────────────────────

pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
    argon2__rounds=settings.argon2_time_cost,
    argon2__memory_cost=settings.argon2_memory_cost,
    argon2__parallelism=settings.argon2_parallelism,
    argon2__salt_size=settings.argon2_salt_size,
    argon2__digest_size=settings.argon2_digest_size,
)


def hash_password(password: str) -> str:
    """Hash a password into a self-describing Argon2 string.

    The result encodes the cost parameters, the random salt and the digest,
    so ``verify_password`` needs nothing else.
    """
    if not isinstance(password, str) or len(password) < settings.password_min_length:
        raise ValidationError(
            "password",
            f"Password must be a string with at least {settings.password_min_length} characters",
        )
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str | None) -> bool:
    """Constant-time check of ``plain`` against a stored hash.

    Malformed or missing hashes verify as False instead of raising.
    """
    if not isinstance(plain, str) or not isinstance(hashed, str) or not hashed:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        return False


def dummy_verify() -> None:
    """Burn one verification's worth of time for logins with no user."""
    pwd_context.dummy_verify()


# ── Session tokens ────────────────────────────────────────────

def generate_session_token() -> str:
    """Generate a cryptographically secure 256-bit session token."""
    return secrets.token_urlsafe(32)
