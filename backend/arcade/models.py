from datetime import datetime, timezone

from arcade import db


def utcnow():
    return datetime.now(timezone.utc)


def _isoformat(value):
    return value.isoformat() if value else None


class User(db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(128), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def to_dict(self):
        # Public identity only; the hash never leaves the credential store
        return {
            'id': self.id,
            'username': self.username,
        }

    def __repr__(self):
        return f'<User {self.id} {self.username!r}>'


class ScoreRecord(db.Model):
    __tablename__ = 'scores'
    __table_args__ = (
        db.UniqueConstraint('user_id', 'game_id', name='uq_scores_user_game'),
    )
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    game_id = db.Column(db.String(128), nullable=False)
    score = db.Column(db.BigInteger, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'game_id': self.game_id,
            'score': self.score,
            'updated_at': _isoformat(self.updated_at),
        }

    def __repr__(self):
        return f'<ScoreRecord user={self.user_id} game={self.game_id!r} score={self.score}>'
