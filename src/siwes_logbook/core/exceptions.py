class DomainError(Exception):
    """Base exception for business rule violations.

    Every subclass carries a stable ``code`` and the HTTP status the
    controller layer answers with.
    """

    code = "domain_error"
    http_status = 400

    def __init__(self, message: str = "", *, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"
    http_status = 400


class AlreadyCheckedInError(ValidationError):
    code = "already_checked_in"


class NoCheckInError(ValidationError):
    code = "no_check_in"


class AlreadyCheckedOutError(ValidationError):
    code = "already_checked_out"


class IllegalTransitionError(ValidationError):
    code = "illegal_transition"


class AuthenticationError(DomainError):
    """Raised when no authenticated principal is attached to the request."""

    code = "unauthenticated"
    http_status = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "forbidden"
    http_status = 403


class LockedError(AuthorizationError):
    """Raised when a graded student tries to change attendance or logbook."""

    code = "locked"


class NotFoundError(DomainError):
    code = "not_found"
    http_status = 404


class ConflictError(DomainError):
    """Uniqueness violation or a conditional update that lost a race."""

    code = "conflict"
    http_status = 409


class DatastoreError(DomainError):
    """The datastore could not be reached or the query failed."""

    code = "datastore_unavailable"
    http_status = 503
