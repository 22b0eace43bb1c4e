# /carepoint/extensions.py
"""Extension singletons, bound to the application in ``create_app``."""
from flask_bcrypt import Bcrypt
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_socketio import SocketIO
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
migrate = Migrate()

bcrypt = Bcrypt()
jwt = JWTManager()
limiter = Limiter(key_func=get_remote_address, headers_enabled=True)
cors = CORS()

# CORS origins and async_mode are set in create_app; CLI commands never start a server.
socketio = SocketIO()
