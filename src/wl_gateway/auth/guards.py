from src.wl_common.errors import AuthError
from src.wl_gateway.user.models import User


def require_identity(me: User | None) -> User:
    """Reject anonymous callers before any store access happens."""
    if me is None:
        raise AuthError("Authentication required")
    return me
