"""Error taxonomy shared by every ledger operation.

Status classification is deliberately coarse:
  404: the referenced record does not exist
  403: authentication required / not allowed
  400: everything else (bad input, conflicts, invariant violations)
"""


class AppError(Exception):
    """Base application error."""

    def __init__(self, message: str, http_status: int = 400) -> None:
        self.message = message
        self.http_status = http_status
        super().__init__(message)


class ValidationError(AppError):
    """Malformed input: bad username pattern, empty password, corrupt payload."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class ConflictError(AppError):
    """Duplicate username or duplicate access grant."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class NotFoundError(AppError):
    def __init__(self, message: str = "404") -> None:
        super().__init__(message, 404)


class AuthError(AppError):
    """Missing or invalid token, wrong password, or caller not a wallet member."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, 403)


class InvariantError(AppError):
    """The operation would break a ledger invariant (e.g. empty access list)."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 400)
