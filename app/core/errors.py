"""Typed failures raised by the asset service.

Each kind carries the HTTP status the API layer answers with, so callers
can branch on the exception class and the API can map any of them with a
single handler.
"""


class AssetServiceError(Exception):
    """Base class for every domain failure."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(AssetServiceError):
    """Malformed or out-of-range input."""

    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(message)


class AuthenticationError(AssetServiceError):
    """Credential mismatch. The message never says which half was wrong."""

    status_code = 401
    code = "AUTHENTICATION_FAILED"

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class AuthorizationError(AssetServiceError):
    """Actor lacks the required role or site assignment."""

    status_code = 403
    code = "FORBIDDEN"


class NotFoundError(AssetServiceError):
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: object) -> None:
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found")


class ConflictError(AssetServiceError):
    """Uniqueness violation."""

    status_code = 409
    code = "CONFLICT"


class PreconditionError(AssetServiceError):
    """Entity exists but is in the wrong state for the operation."""

    status_code = 409
    code = "PRECONDITION_FAILED"
