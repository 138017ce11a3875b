"""Application error taxonomy.

Every error carries a human-readable ``message`` and the HTTP status the API
answers with. Handlers registered in ``create_app`` turn them into JSON.
"""

class PortalError(Exception):
    """Base class for errors reported to API callers."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

class ValidationError(PortalError):
    """Malformed or out-of-policy input. Nothing has been written."""
    status_code = 400

class AuthenticationError(PortalError):
    """No usable identity for the request."""
    status_code = 401

class AuthorizationError(PortalError):
    """Caller's roles do not permit the operation."""
    status_code = 403

class NotFoundError(PortalError):
    status_code = 404

class ConflictError(PortalError):
    status_code = 409

class PersistenceError(PortalError):
    """A storage write failed, possibly after part of a batch was applied."""

    status_code = 400

    def __init__(self, message: str, succeeded: int = 0, total: int = 0):
        super().__init__(message)
        self.succeeded = succeeded
        self.total = total

class DependencyError(PortalError):
    """An external collaborator (email provider) failed.

    Never surfaced to API callers; the primary operation still succeeds.
    """
    status_code = 502
