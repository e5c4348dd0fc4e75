"""Typed errors raised by the account and score services.

Each error carries the HTTP status it maps to and a message that is safe to
show to the client. The application factory registers a single handler that
turns them into ``{"error": message}`` responses.
"""


class ArcadeError(Exception):
    status_code = 500
    default_message = 'Internal server error'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'error': self.message}


class ValidationError(ArcadeError):
    """Required input is missing or has the wrong shape."""
    status_code = 400
    default_message = 'Missing fields'


class ConflictError(ArcadeError):
    """A unique key (e.g. the username) is already taken."""
    status_code = 400
    default_message = 'Username already exists'


class AuthError(ArcadeError):
    """Bad credentials, or a missing/invalid session token."""
    status_code = 401
    default_message = 'Invalid credentials'


class InternalError(ArcadeError):
    status_code = 500
