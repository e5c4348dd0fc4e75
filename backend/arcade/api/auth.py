from flask import Blueprint, current_app, g, jsonify

from arcade.api import credential_store, json_body, session_authority, session_required
from arcade.errors import AuthError

auth = Blueprint('auth', __name__)


def _cookie_name():
    return current_app.config.get('SESSION_TOKEN_COOKIE', 'token')


def _start_session(user):
    authority = session_authority()
    token = authority.issue(user)
    response = jsonify(user.to_dict())
    response.set_cookie(
        _cookie_name(),
        token,
        max_age=authority.expires_in or None,
        httponly=True,
        secure=True,
        samesite='None',
    )
    return response


@auth.route('/register', methods=['POST'])
def register():
    data = json_body()
    user = credential_store().register(data.get('username'), data.get('password'))
    current_app.logger.info(f"[register] user={user.id}")
    return _start_session(user)


@auth.route('/login', methods=['POST'])
def login():
    data = json_body()
    try:
        user = credential_store().verify_login(data.get('username'), data.get('password'))
    except AuthError:
        current_app.logger.info("[login] rejected credentials")
        raise
    current_app.logger.info(f"[login] user={user.id}")
    return _start_session(user)


@auth.route('/me', methods=['GET'])
@session_required
def me():
    return jsonify(g.identity.to_dict())


@auth.route('/logout', methods=['POST'])
def logout():
    response = jsonify({'success': True})
    response.delete_cookie(_cookie_name(), httponly=True, secure=True, samesite='None')
    return response
