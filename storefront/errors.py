"""Service errors and the HTTP status each one maps to."""


class ServiceError(Exception):
    """Base error raised by services; `message` is safe to show to callers."""
    status_code = 500
    default_message = 'Server error'

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {'success': False, 'message': self.message}


class ValidationError(ServiceError):
    """A required field is missing or malformed."""
    status_code = 400
    default_message = 'Invalid request'


class AuthError(ServiceError):
    """Bad credentials or missing/invalid admin token."""
    status_code = 401
    default_message = 'Invalid username or password'


class NotFoundError(ServiceError):
    """The referenced record does not exist."""
    status_code = 404
    default_message = 'Not found'


class StoreError(ServiceError):
    """Unexpected persistence failure. Detail stays in the logs."""
    status_code = 500
    default_message = 'Database error'
