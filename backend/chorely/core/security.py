"""
Security helpers for local authentication.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import re
import secrets
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from chorely.core.config import Settings
from chorely.core.exceptions import AuthenticationError

_PBKDF2_ALGO = "pbkdf2_sha256"
_PBKDF2_ITERATIONS = 600_000
_JWT_ALGORITHM = "HS256"
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def hash_password(password: str, iterations: int = _PBKDF2_ITERATIONS) -> str:
    """Hash a password using PBKDF2-HMAC-SHA256."""
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return _format_hash(iterations, salt, digest)


def verify_password(password: str, stored_hash: str) -> bool:
    """Verify a password against the stored hash."""
    try:
        algo, iterations, salt, digest = _parse_hash(stored_hash)
    except ValueError:
        return False
    if algo != _PBKDF2_ALGO:
        return False
    computed = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return hmac.compare_digest(computed, digest)


def normalize_email(value: str) -> str:
    return value.strip().lower()


def is_valid_email(value: str) -> bool:
    return bool(_EMAIL_RE.match(value))


def password_problems(password: str, min_length: int) -> list[str]:
    """Return the list of unmet password requirements (empty when valid)."""
    problems = []
    if len(password) < min_length:
        problems.append(f"Password must be at least {min_length} characters long")
    if not re.search(r"[A-Za-z]", password):
        problems.append("Password must contain at least one letter")
    if not re.search(r"\d", password):
        problems.append("Password must contain at least one number")
    return problems


def create_access_token(user_id: str, settings: Settings, expires_minutes: int | None = None) -> str:
    """Create a signed JWT for a user."""
    now = datetime.now(timezone.utc)
    expires = now + timedelta(minutes=expires_minutes or settings.JWT_EXPIRE_MINUTES)
    payload = {
        "sub": user_id,
        "iat": int(now.timestamp()),
        "exp": int(expires.timestamp()),
    }
    if settings.JWT_ISSUER:
        payload["iss"] = settings.JWT_ISSUER
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=_JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> str:
    """Validate a JWT and return its subject (user id)."""
    try:
        claims = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_JWT_ALGORITHM],
            issuer=settings.JWT_ISSUER or None,
            options={"verify_iss": bool(settings.JWT_ISSUER)},
        )
    except JWTError as exc:
        raise AuthenticationError("Invalid or expired token") from exc
    subject = claims.get("sub")
    if not subject:
        raise AuthenticationError("Missing subject")
    return str(subject)


def _format_hash(iterations: int, salt: bytes, digest: bytes) -> str:
    salt_b64 = base64.b64encode(salt).decode("ascii")
    digest_b64 = base64.b64encode(digest).decode("ascii")
    return f"{_PBKDF2_ALGO}${iterations}${salt_b64}${digest_b64}"


def _parse_hash(stored_hash: str) -> tuple[str, int, bytes, bytes]:
    parts = stored_hash.split("$")
    if len(parts) != 4:
        raise ValueError("Invalid hash format")
    algo, iterations_str, salt_b64, digest_b64 = parts
    iterations = int(iterations_str)
    salt = base64.b64decode(salt_b64.encode("ascii"))
    digest = base64.b64decode(digest_b64.encode("ascii"))
    return algo, iterations, salt, digest
