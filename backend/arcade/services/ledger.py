import logging
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from arcade.errors import InternalError, ValidationError
from arcade.models import ScoreRecord, utcnow

logger = logging.getLogger(__name__)

GAME_ID_MAX_LENGTH = 128
# Signed 64-bit, the range of the BIGINT score column
SCORE_MIN = -(2 ** 63)
SCORE_MAX = 2 ** 63 - 1


def validate_submission(game_id, score):
    if not isinstance(game_id, str) or not game_id:
        raise ValidationError('game_id is required')
    if len(game_id) > GAME_ID_MAX_LENGTH:
        raise ValidationError(f'game_id must be at most {GAME_ID_MAX_LENGTH} characters')
    # bool is an int subclass; reject it explicitly
    if isinstance(score, bool) or not isinstance(score, int):
        raise ValidationError('score must be an integer')
    if not SCORE_MIN <= score <= SCORE_MAX:
        raise ValidationError('score is out of range')


class ScoreLedger:
    """Best score per (user, game).

    A submission only wins when it is strictly greater than the stored score.
    The compare-and-set happens inside a single conditional UPDATE, so two
    concurrent submissions for the same pair cannot both win from a stale read.
    """

    def __init__(self, session, clock=utcnow):
        self._session = session
        self._clock = clock

    def list_scores(self, user_id) -> List[ScoreRecord]:
        return (
            self._session.query(ScoreRecord)
            .filter(ScoreRecord.user_id == user_id)
            .order_by(ScoreRecord.id)
            .all()
        )

    def get_score(self, user_id, game_id) -> Optional[ScoreRecord]:
        return (
            self._session.query(ScoreRecord)
            .filter_by(user_id=user_id, game_id=game_id)
            .first()
        )

    def submit_score(self, user_id, game_id, score) -> bool:
        """Record ``score`` if it beats the stored one. Returns True when accepted."""
        validate_submission(game_id, score)

        # Second pass only happens after losing an insert race for the same pair
        for attempt in range(2):
            now = self._clock()
            if self._raise_score(user_id, game_id, score, now):
                self._session.commit()
                logger.info(f"New best for user={user_id} game={game_id!r}: {score}")
                return True

            if self._exists(user_id, game_id):
                self._session.rollback()
                return False

            self._session.add(ScoreRecord(user_id=user_id, game_id=game_id, score=score, updated_at=now))
            try:
                self._session.commit()
            except IntegrityError:
                self._session.rollback()
                if not self._exists(user_id, game_id):
                    # Nothing took our place, so the insert itself is invalid (e.g. unknown user)
                    logger.warning(f"Insert rejected for user={user_id} game={game_id!r}; user may no longer exist")
                    break
                logger.info(f"Insert conflict for user={user_id} game={game_id!r} (attempt {attempt + 1})")
                continue
            logger.info(f"First score for user={user_id} game={game_id!r}: {score}")
            return True

        raise InternalError('Score could not be recorded')

    def _raise_score(self, user_id, game_id, score, now) -> bool:
        result = self._session.execute(
            update(ScoreRecord)
            .where(
                ScoreRecord.user_id == user_id,
                ScoreRecord.game_id == game_id,
                ScoreRecord.score < score,
            )
            .values(score=score, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    def _exists(self, user_id, game_id) -> bool:
        return (
            self._session.query(ScoreRecord.id)
            .filter_by(user_id=user_id, game_id=game_id)
            .first()
            is not None
        )
