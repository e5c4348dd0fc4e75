import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError

from arcade.errors import AuthError, ConflictError, ValidationError
from arcade.models import User

logger = logging.getLogger(__name__)

USERNAME_MAX_LENGTH = 64


def _require_text(value, field):
    if value is None or value == '':
        raise ValidationError('Missing fields')
    if not isinstance(value, str):
        raise ValidationError(f'{field} must be a string')
    return value


class CredentialStore:
    """Creates accounts and verifies login credentials.

    ``session`` is a SQLAlchemy session (the app passes ``db.session``) and
    ``hasher`` a ``flask_bcrypt.Bcrypt`` instance whose work factor comes from
    ``BCRYPT_LOG_ROUNDS``.
    """

    def __init__(self, session, hasher):
        self._session = session
        self._hasher = hasher
        self._dummy_hash = None

    def register(self, username, password) -> User:
        username = _require_text(username, 'username')
        password = _require_text(password, 'password')
        if len(username) > USERNAME_MAX_LENGTH:
            raise ValidationError(f'username must be at most {USERNAME_MAX_LENGTH} characters')

        if self._find(username) is not None:
            raise ConflictError('Username already exists')

        user = User(
            username=username,
            password_hash=self._hasher.generate_password_hash(password).decode('utf-8'),
        )
        self._session.add(user)
        try:
            self._session.commit()
        except IntegrityError:
            # Lost a race against a concurrent registration of the same name
            self._session.rollback()
            raise ConflictError('Username already exists')
        logger.info(f"Registered user {user.id} '{user.username}'")
        return user

    def verify_login(self, username, password) -> User:
        if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
            raise AuthError('Invalid credentials')

        user = self._find(username)
        if user is None:
            # Burn a hash check anyway so unknown names and wrong passwords look alike
            self._hasher.check_password_hash(self._get_dummy_hash(), password)
            raise AuthError('Invalid credentials')
        if not self._hasher.check_password_hash(user.password_hash, password):
            raise AuthError('Invalid credentials')
        return user

    def get_user(self, user_id) -> Optional[User]:
        return self._session.get(User, user_id)

    def _find(self, username) -> Optional[User]:
        return self._session.query(User).filter(User.username == username).first()

    def _get_dummy_hash(self):
        if self._dummy_hash is None:
            self._dummy_hash = self._hasher.generate_password_hash('not-a-real-password').decode('utf-8')
        return self._dummy_hash
