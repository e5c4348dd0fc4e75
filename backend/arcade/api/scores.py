from flask import Blueprint, current_app, g, jsonify

from arcade.api import json_body, score_ledger, session_required

scores = Blueprint('scores', __name__)


@scores.route('', methods=['GET'])
@session_required
def list_scores():
    records = score_ledger().list_scores(g.identity.id)
    return jsonify([r.to_dict() for r in records])


@scores.route('', methods=['POST'])
@session_required
def submit_score():
    data = json_body()
    game_id = data.get('game_id')
    score = data.get('score')
    accepted = score_ledger().submit_score(g.identity.id, game_id, score)
    current_app.logger.info(
        f"[score] user={g.identity.id} game={game_id!r} score={score} accepted={accepted}"
    )
    # Non-improving submissions are acknowledged the same way
    return jsonify({'success': True})
