from functools import wraps

from flask import current_app, g, request


def credential_store():
    return current_app.extensions['arcade.credentials']


def session_authority():
    return current_app.extensions['arcade.sessions']


def score_ledger():
    return current_app.extensions['arcade.ledger']


def session_required(view):
    """Resolve the session cookie to ``g.identity`` or answer 401."""
    @wraps(view)
    def wrapped(*args, **kwargs):
        token = request.cookies.get(current_app.config.get('SESSION_TOKEN_COOKIE', 'token'))
        # AuthError propagates to the app-level handler as a 401
        g.identity = session_authority().verify(token)
        return view(*args, **kwargs)
    return wrapped


def json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
