from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(cors_allowed_origins='*', async_mode=None)


def create_app(config_class=Config, now=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins='*')

    # One owner per process for lobby, schedule and handoff state
    from arena.services.games import build_services
    from arena.services.reader import ReaderProcess
    flask_app.extensions['arena'] = build_services(flask_app.config, now=now)
    flask_app.extensions['nfc_reader'] = ReaderProcess(flask_app)

    from arena.routes import main
    flask_app.register_blueprint(main)

    from arena.api.games import games
    flask_app.register_blueprint(games)

    from arena.api.scores import scores
    flask_app.register_blueprint(scores, url_prefix='/scores')
    # Legacy mount used by the scoring display
    flask_app.register_blueprint(scores, url_prefix='/retrieve', name='retrieve')

    from arena.api.reader import reader
    flask_app.register_blueprint(reader, url_prefix='/nfc')

    from arena.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates all tables."""
        import arena.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    @click.command('import-students')
    @click.argument('path', required=False)
    def import_students_command(path):
        """Upserts the player directory from a JSON array."""
        source = path or flask_app.config.get('STUDENTS_JSON_PATH')
        with flask_app.app_context():
            inserted, updated = flask_app.extensions['arena'].directory.import_file(source)
            print(f'Import complete. Inserted: {inserted}, Updated: {updated}')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(import_students_command)

    return flask_app
