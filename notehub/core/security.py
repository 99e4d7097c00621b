"""Security utilities: password hashing and the session token codec."""

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from notehub.core.config import Settings, get_settings
from notehub.core.errors import InvalidTokenError, TokenExpiredError

# ── Password hashing (Argon2) ────────────────────────────────

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def dummy_verify() -> None:
    """Spend the same time as a real verification when no user matched."""
    pwd_context.dummy_verify()


def generate_temp_password() -> str:
    """Random password handed out once when an admin invites a user."""
    return secrets.token_urlsafe(12)


# ── Session tokens (JWT) ─────────────────────────────────────

@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    email: str
    role: str
    tenant_id: int
    tenant_slug: str


def _signing_key(settings: Settings) -> str:
    key = settings.jwt_secret_key
    if not key:
        raise RuntimeError("JWT_SECRET_KEY is not configured")
    return key


def create_jwt(
    user_id: int,
    email: str,
    role: str,
    tenant_id: int,
    tenant_slug: str,
    expires_delta: timedelta | None = None,
    settings: Settings | None = None,
) -> str:
    settings = settings or get_settings()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    payload = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "tid": tenant_id,
        "tslug": tenant_slug,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(payload, _signing_key(settings), algorithm=settings.jwt_algorithm)


def decode_jwt(token: str, settings: Settings | None = None) -> TokenClaims:
    """Verify signature and expiry and return the embedded identity.

    Raises TokenExpiredError or InvalidTokenError.
    """
    settings = settings or get_settings()
    try:
        payload = jwt.decode(
            token, _signing_key(settings), algorithms=[settings.jwt_algorithm]
        )
    except ExpiredSignatureError as exc:
        raise TokenExpiredError() from exc
    except JWTError as exc:
        raise InvalidTokenError() from exc

    try:
        return TokenClaims(
            user_id=int(payload["sub"]),
            email=payload["email"],
            role=payload["role"],
            tenant_id=int(payload["tid"]),
            tenant_slug=payload["tslug"],
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidTokenError("Malformed token payload") from exc
