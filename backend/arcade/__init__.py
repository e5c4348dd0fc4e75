import logging

import click
from flask import Flask, jsonify
from flask_bcrypt import Bcrypt
from flask_cors import CORS
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException, InternalServerError

from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
migrate = Migrate()


def _enable_sqlite_foreign_keys(engine):
    # SQLite ignores REFERENCES clauses unless asked per connection
    if engine.dialect.name != 'sqlite':
        return

    @event.listens_for(engine, 'connect')
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()


def _register_error_handlers(flask_app):
    from arcade.errors import ArcadeError, InternalError

    @flask_app.errorhandler(ArcadeError)
    def handle_arcade_error(exc):
        if exc.status_code >= 500:
            flask_app.logger.error(f"[error] {type(exc).__name__}: {exc.message}")
        return jsonify(exc.to_dict()), exc.status_code

    @flask_app.errorhandler(SQLAlchemyError)
    def handle_database_error(exc):
        db.session.rollback()
        flask_app.logger.exception('[error] unexpected database failure')
        return jsonify(InternalError().to_dict()), 500

    @flask_app.errorhandler(InternalServerError)
    def handle_unexpected_error(exc):
        # Unhandled exceptions arrive here wrapped, with the cause on original_exception
        cause = getattr(exc, 'original_exception', None) or exc
        flask_app.logger.error(f"[error] unhandled {type(cause).__name__}: {cause}")
        return jsonify(InternalError().to_dict()), 500

    @flask_app.errorhandler(HTTPException)
    def handle_http_error(exc):
        return jsonify({'error': exc.name}), exc.code


def _build_services(flask_app):
    from arcade.services import CredentialStore, ScoreLedger, SessionAuthority

    cfg = flask_app.config
    flask_app.extensions['arcade.credentials'] = CredentialStore(db.session, bcrypt)
    flask_app.extensions['arcade.sessions'] = SessionAuthority(
        cfg['SESSION_TOKEN_SECRET'],
        algorithm=cfg.get('SESSION_TOKEN_ALGORITHM', 'HS256'),
        expires_in=int(cfg.get('SESSION_TOKEN_EXPIRES_SEC', 0)),
    )
    flask_app.extensions['arcade.ledger'] = ScoreLedger(db.session)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    logging.basicConfig(
        level=flask_app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    migrate.init_app(flask_app, db)
    # The session cookie is SameSite=None, so the frontend origin must be allowed credentials
    CORS(flask_app, supports_credentials=True, origins=flask_app.config.get('CORS_ORIGINS', []))

    _build_services(flask_app)
    _register_error_handlers(flask_app)

    from arcade.main import main
    flask_app.register_blueprint(main)

    from arcade.api.auth import auth
    flask_app.register_blueprint(auth, url_prefix='/api/auth')

    from arcade.api.scores import scores
    flask_app.register_blueprint(scores, url_prefix='/api/scores')

    # Schema is created idempotently on startup
    import arcade.models  # noqa: F401
    with flask_app.app_context():
        _enable_sqlite_foreign_keys(db.engine)
        db.create_all()

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from arcade.services import CredentialStore
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            store = CredentialStore(db.session, bcrypt)
            for username in ['testuser1', 'testuser2', 'testuser3']:
                user = store.register(username, 'password')
                # Read back through the store to confirm the commit landed
                seeded = store.get_user(user.id)
                print(f'Seeded {seeded.username} (id={seeded.id})')
            print('Database has been reset and seeded!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
