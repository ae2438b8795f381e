from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Game services: the store owns every room, the notifier fans out
    # accepted states to observers and the Socket.IO room of the game
    from dropfour.services.games.notifier import ChangeNotifier
    from dropfour.services.games.store import RoomStore
    from dropfour.socketio_events import broadcast_state, register_socketio_handlers

    notifier = ChangeNotifier()
    notifier.init_app(flask_app, channel=broadcast_state)
    RoomStore(notifier=notifier).init_app(flask_app)

    from dropfour.main import main
    flask_app.register_blueprint(main)

    from dropfour.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api/rooms')

    register_socketio_handlers()

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the database tables."""
        import dropfour.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
