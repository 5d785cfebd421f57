"""Error taxonomy shared by the gateway, stores and form controllers."""


class SchoolDataError(Exception):
    """Base class for every error surfaced to the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SchoolDataError):
    """Client-side input problem, raised before any network call."""


class ConflictError(SchoolDataError):
    """Uniqueness violation reported by the server (HTTP 409)."""


class NotFoundError(SchoolDataError):
    """The row no longer exists (HTTP 404)."""


class AuthError(SchoolDataError):
    """Bad credentials or wrong current password (HTTP 401/403)."""


class ServerError(SchoolDataError):
    """Unclassified server failure."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class NetworkError(SchoolDataError):
    """Transport failure; the request never produced a response."""
