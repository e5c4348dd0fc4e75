import os


def _split_origins(raw):
    return [o.strip() for o in raw.split(',') if o.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///arcade.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Session tokens (JWT signed with a shared secret)
    SESSION_TOKEN_SECRET = os.environ.get('JWT_SECRET') or 'batcomputer-secret-key-123'
    SESSION_TOKEN_ALGORITHM = os.environ.get('JWT_ALGORITHM', 'HS256')
    # Token lifetime (seconds). 0 issues tokens without an expiry claim.
    SESSION_TOKEN_EXPIRES_SEC = int(os.environ.get('SESSION_TOKEN_EXPIRES_SEC', str(7 * 24 * 3600)))
    SESSION_TOKEN_COOKIE = 'token'
    # Password hashing work factor
    BCRYPT_LOG_ROUNDS = int(os.environ.get('BCRYPT_LOG_ROUNDS', '10'))
    BCRYPT_HANDLE_LONG_PASSWORDS = True
    # Presentation layer origins allowed to send the session cookie
    CORS_ORIGINS = _split_origins(os.environ.get(
        'CORS_ORIGINS',
        'http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173',
    ))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
