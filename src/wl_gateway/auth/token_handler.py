"""Stateless bearer tokens.

Wire format: <userId>_<nonce>_<digest> where digest = salted_digest("<userId>_<nonce>").
Nothing is persisted per session; a token is valid as long as its digest
matches under the current AUTH_SALT and the user still exists.

NOTE: No expiry and no revocation. Once issued, a token stays valid until
AUTH_SALT is rotated, which invalidates every token (and every password
digest) at once.
"""

import hmac
import secrets

from config.settings import settings
from src.wl_common.errors import AuthError
from src.wl_gateway.auth.password import salted_digest

_NONCE_BYTES = 16


class TokenService:
    def __init__(self, salt: str | None = None) -> None:
        self._salt = settings.AUTH_SALT if salt is None else salt

    def issue(self, user_id: str) -> str:
        # hex keeps "_" out of the nonce so the token splits into exactly three parts
        nonce = secrets.token_hex(_NONCE_BYTES)
        body = f"{user_id}_{nonce}"
        return f"{body}_{salted_digest(body, self._salt)}"

    def verify(self, token: str) -> str:
        """Return the user id carried by a well-formed, correctly signed token.

        Raises:
            AuthError: wrong number of parts, empty parts, or digest mismatch.
        """
        parts = token.split("_")
        if len(parts) != 3 or not all(parts):
            raise AuthError()
        user_id, nonce, digest = parts
        expected = salted_digest(f"{user_id}_{nonce}", self._salt)
        if not hmac.compare_digest(expected.encode(), digest.encode()):
            raise AuthError()
        return user_id


token_service = TokenService()
