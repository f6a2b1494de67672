import sys

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from arena import create_app, db, socketio

app = create_app()


def check_store(flask_app):
    """Exit when the database cannot be reached at startup."""
    with flask_app.app_context():
        try:
            db.session.execute(text('SELECT 1'))
        except SQLAlchemyError as exc:
            flask_app.logger.error(f"Failed to start server: {exc}")
            sys.exit(1)
        finally:
            db.session.remove()
    flask_app.logger.info('Database connected')


if __name__ == '__main__':
    check_store(app)
    # Use SocketIO server to enable websockets in dev
    socketio.run(app, port=app.config.get('PORT', 3000), debug=True)
