from flask import Blueprint, current_app, jsonify

from arena.services.games.errors import ReaderAlreadyRunning, ReaderNotRunning, ReaderStartError


reader = Blueprint('reader', __name__)


def _reader():
    return current_app.extensions['nfc_reader']


@reader.route('/start', methods=['POST'])
def start_reader():
    try:
        pid = _reader().start()
    except ReaderAlreadyRunning as exc:
        return jsonify({'success': False, 'message': str(exc)}), 400
    except ReaderStartError as exc:
        return jsonify({'success': False, 'message': 'Failed to start NFC reader', 'error': str(exc)}), 500
    return jsonify({'success': True, 'message': 'NFC reader started successfully', 'pid': pid})


@reader.route('/stop', methods=['POST'])
def stop_reader():
    try:
        _reader().stop()
    except ReaderNotRunning as exc:
        return jsonify({'success': False, 'message': str(exc)}), 400
    return jsonify({'success': True, 'message': 'NFC reader stopped successfully'})


@reader.route('/status', methods=['GET'])
def reader_status():
    return jsonify({'success': True, **_reader().status()})
