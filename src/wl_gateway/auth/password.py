"""Salted SHA-256 digests for passwords and token signatures.

digest(value) = SHA-256 over "<AUTH_SALT>_<value>", rendered as the decimal
value of every byte concatenated ("byte-joined"). The rendering is kept so
credentials written by earlier deployments still verify.

NOTE: a single fast hash with a global salt is weaker than a per-user
adaptive hash (bcrypt/argon2). It is retained because stored credentials
and issued tokens depend on this exact format.
"""

import hashlib
import hmac

from config.settings import settings


def salted_digest(value: str, salt: str | None = None) -> str:
    salt = settings.AUTH_SALT if salt is None else salt
    raw = hashlib.sha256(f"{salt}_{value}".encode("utf-8")).digest()
    return "".join(str(b) for b in raw)


def hash_password(plain: str, salt: str | None = None) -> str:
    return salted_digest(plain, salt)


def verify_password(plain: str, hashed: str, salt: str | None = None) -> bool:
    """Constant-time comparison of a plain password against a stored digest."""
    return hmac.compare_digest(salted_digest(plain, salt).encode(), hashed.encode())
