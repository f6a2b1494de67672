from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, request

from arena import socketio
from arena.services.games.catalog import clamp_limit
from arena.services.games.errors import StorageUnavailable


games = Blueprint('games', __name__)


def _services():
    return current_app.extensions['arena']


def _now_iso():
    return datetime.now(timezone.utc).isoformat()


@games.route('/register', methods=['POST'])
def register():
    data = request.get_json(silent=True)
    current_app.logger.info(f"[register] scan data received: {data}")
    if not isinstance(data, dict) or 'roll' not in data:
        return jsonify({'message': 'Bad request: roll is required'}), 400

    try:
        result = _services().assembler.submit(data['roll'], data)
    except StorageUnavailable as exc:
        return jsonify({'message': 'Internal server error', 'error': str(exc)}), 500
    except Exception as exc:
        current_app.logger.exception(f"Error processing request: {exc}")
        return jsonify({'message': 'Internal server error', 'error': str(exc)}), 500

    # Duplicate taps and unknown cards are acknowledged, not retried
    payload = {'message': 'Student processed', 'accepted': result.accepted, 'reason': result.reason}
    if result.game is not None:
        game = result.game.to_dict()
        payload['game'] = game
        socketio.emit('teams_update', {'game_no': game['game_no'], 'play_time': game['play_time']},
                      to='display', namespace='/ws')
    return jsonify(payload), 200


@games.route('/lobby', methods=['GET'])
def get_lobby():
    return jsonify(_services().assembler.snapshot())


@games.route('/teams', methods=['GET'])
def list_teams():
    cfg = current_app.config
    limit = clamp_limit(
        request.args.get('limit'),
        default=int(cfg.get('TEAMS_DEFAULT_LIMIT', 5)),
        maximum=int(cfg.get('TEAMS_MAX_LIMIT', 50)),
    )
    try:
        records, total = _services().catalog.list_upcoming(limit)
    except StorageUnavailable as exc:
        return jsonify({
            'success': False,
            'error': 'Internal server error',
            'message': str(exc),
            'timestamp': _now_iso(),
        }), 500
    return jsonify({
        'success': True,
        'count': len(records),
        'total': total,
        'team_size': int(cfg.get('TEAM_SIZE', 4)),
        'teams': [r.to_dict() for r in records],
        'timestamp': _now_iso(),
    })
