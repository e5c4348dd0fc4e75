"""Stateless session tokens.

A session is a JWT signed with a shared secret and carrying the user's
``id`` and ``username``. Nothing is stored server side: verifying a token is a
pure function of the secret, so logging out only discards the client's copy.
"""

import logging
import time
from typing import Callable, NamedTuple, Optional

from jose import JWTError, jwt

from arcade.errors import AuthError

logger = logging.getLogger(__name__)


class Identity(NamedTuple):
    id: int
    username: str

    def to_dict(self):
        return {'id': self.id, 'username': self.username}


class SessionAuthority:
    def __init__(self, secret: str, algorithm: str = 'HS256', expires_in: int = 0,
                 clock: Callable[[], float] = time.time):
        if not secret:
            raise ValueError('a signing secret is required')
        self._secret = secret
        self._algorithm = algorithm
        self._expires_in = expires_in
        self._clock = clock

    @property
    def expires_in(self) -> int:
        return self._expires_in

    def issue(self, user) -> str:
        """Sign a token for ``user`` (anything with ``id`` and ``username``)."""
        now = int(self._clock())
        claims = {'id': user.id, 'username': user.username, 'iat': now}
        if self._expires_in > 0:
            claims['exp'] = now + self._expires_in
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify(self, token: Optional[str]) -> Identity:
        if not token or not isinstance(token, str):
            raise AuthError('Unauthorized')
        try:
            # Expiry is checked against our clock below, not jose's wall clock
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={'verify_exp': False},
            )
        except JWTError as exc:
            logger.debug(f"Rejected session token: {exc}")
            raise AuthError('Invalid token')

        exp = payload.get('exp')
        if exp is not None:
            if not isinstance(exp, (int, float)) or self._clock() >= exp:
                raise AuthError('Invalid token')

        user_id = payload.get('id')
        username = payload.get('username')
        if isinstance(user_id, bool) or not isinstance(user_id, int) or not isinstance(username, str):
            raise AuthError('Invalid token')
        return Identity(user_id, username)
