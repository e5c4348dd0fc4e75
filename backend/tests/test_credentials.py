import pytest

from arcade import db
from arcade.errors import AuthError, ConflictError, ValidationError
from arcade.models import User


def test_register_then_login_returns_same_user(credentials):
    user = credentials.register('bruce', 'pw1')
    assert user.id is not None
    assert user.to_dict() == {'id': user.id, 'username': 'bruce'}

    logged_in = credentials.verify_login('bruce', 'pw1')
    assert logged_in.id == user.id


def test_password_is_stored_hashed(credentials):
    user = credentials.register('alfred', 'butler')
    stored = db.session.get(User, user.id)
    assert stored.password_hash != 'butler'
    assert stored.password_hash.startswith('$2')
    assert 'password_hash' not in user.to_dict()
    assert stored.created_at is not None


@pytest.mark.parametrize('password', ['pw1', 'something-else'])
def test_duplicate_username_conflicts_regardless_of_password(credentials, password):
    credentials.register('bruce', 'pw1')
    with pytest.raises(ConflictError) as excinfo:
        credentials.register('bruce', password)
    assert excinfo.value.message == 'Username already exists'
    assert User.query.filter_by(username='bruce').count() == 1


def test_usernames_are_case_sensitive(credentials):
    lower = credentials.register('bruce', 'pw1')
    upper = credentials.register('Bruce', 'pw2')
    assert lower.id != upper.id
    with pytest.raises(AuthError):
        credentials.verify_login('BRUCE', 'pw1')


@pytest.mark.parametrize('username,password', [
    ('', 'pw'),
    ('bruce', ''),
    (None, 'pw'),
    ('bruce', None),
])
def test_register_requires_both_fields(credentials, username, password):
    with pytest.raises(ValidationError) as excinfo:
        credentials.register(username, password)
    assert excinfo.value.message == 'Missing fields'
    assert excinfo.value.status_code == 400


def test_register_rejects_non_string_fields(credentials):
    with pytest.raises(ValidationError):
        credentials.register(42, 'pw')


def test_register_rejects_overlong_username(credentials):
    with pytest.raises(ValidationError):
        credentials.register('x' * 65, 'pw')


def test_wrong_password_and_unknown_user_fail_identically(credentials):
    credentials.register('bruce', 'pw1')

    with pytest.raises(AuthError) as wrong_password:
        credentials.verify_login('bruce', 'wrong')
    with pytest.raises(AuthError) as unknown_user:
        credentials.verify_login('joker', 'pw1')

    assert wrong_password.value.message == unknown_user.value.message == 'Invalid credentials'
    assert wrong_password.value.status_code == unknown_user.value.status_code == 401


def test_login_with_missing_fields_is_an_auth_failure(credentials):
    with pytest.raises(AuthError):
        credentials.verify_login(None, None)


def test_long_passwords_are_accepted(credentials):
    password = 'p' * 100
    user = credentials.register('robin', password)
    assert credentials.verify_login('robin', password).id == user.id
    with pytest.raises(AuthError):
        credentials.verify_login('robin', 'p' * 99)


def test_get_user(credentials):
    user = credentials.register('bruce', 'pw1')
    assert credentials.get_user(user.id).username == 'bruce'
    assert credentials.get_user(user.id + 100) is None
