"""Custom application exceptions.

The auth service reports login and registration outcomes through
``AuthResponse`` objects; these exceptions cover the HTTP-facing failures
(bearer authentication and role checks).
"""


class AppException(Exception):
    """Base application exception carrying an HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class UnauthorizedException(AppException):
    """Missing, unreadable or expired bearer token."""

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message, status_code=401)


class ForbiddenException(AppException):
    """Authenticated principal lacks the required role."""

    def __init__(self, message: str = "Forbidden", required_roles: list[str] | None = None):
        self.required_roles = required_roles or []
        if self.required_roles:
            message = f"{message}: requires one of {', '.join(self.required_roles)}"
        super().__init__(message, status_code=403)
