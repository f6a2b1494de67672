from flask import Blueprint, current_app, jsonify, request

from arena import socketio
from arena.services.games.errors import NoGamesError, StorageUnavailable


scores = Blueprint('scores', __name__)


@scores.route('', methods=['POST'])
@scores.route('/', methods=['POST'])
def submit_scores():
    data = request.get_json(silent=True) or {}
    buffer = current_app.extensions['arena'].handoff
    try:
        merged = buffer.submit(
            data.get('players') or [],
            data.get('team1Score'),
            data.get('team2Score'),
            data.get('gameIsActive'),
        )
    except NoGamesError:
        return jsonify({'message': 'No registrations found'}), 404
    except StorageUnavailable as exc:
        return jsonify({'message': 'Internal server error', 'error': str(exc)}), 500
    socketio.emit('live_result_ready', {'game_no': merged['game_no']}, to='display', namespace='/ws')
    return jsonify({'message': 'Game data received and stored', 'success': True})


@scores.route('', methods=['GET'])
@scores.route('/', methods=['GET'])
def take_scores():
    snapshot = current_app.extensions['arena'].handoff.take()
    if snapshot is None:
        return jsonify({'message': 'No game data available', 'success': False}), 404
    return jsonify(snapshot)
