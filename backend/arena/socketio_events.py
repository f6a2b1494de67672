from flask_socketio import join_room, leave_room, emit
from arena import socketio

DISPLAY_ROOM = 'display'


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_join_display(data=None):
    join_room(DISPLAY_ROOM)
    emit('joined', {'room': DISPLAY_ROOM})


def handle_leave_display(data=None):
    leave_room(DISPLAY_ROOM)
    emit('left', {'room': DISPLAY_ROOM})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    socketio.on_event('connect', handle_connect, namespace='/ws')
    socketio.on_event('join_display', handle_join_display, namespace='/ws')
    socketio.on_event('leave_display', handle_leave_display, namespace='/ws')
    socketio.on_event('ping', handle_ping, namespace='/ws')

    if testing:
        socketio.on_event('connect', handle_connect, namespace='/')
        socketio.on_event('join_display', handle_join_display, namespace='/')
        socketio.on_event('leave_display', handle_leave_display, namespace='/')
        socketio.on_event('ping', handle_ping, namespace='/')
