import os

from flask import Flask

from carepoint.extensions import db, bcrypt, migrate, jwt, limiter, cors, socketio
from carepoint.container import services
from carepoint.utils.error_handlers import register_error_handlers
from carepoint.commands import register_commands
from config import config


def create_app(config_name=None, **service_overrides):
    """
    Application factory.

    ``service_overrides`` are forwarded to the service container, e.g. to swap
    in deterministic payment/insurance providers or a different notifier.
    """
    config_name = config_name or os.environ.get('FLASK_CONFIG', 'default')
    config_class = config[config_name]

    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    db.init_app(app)
    bcrypt.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    limiter.init_app(app)
    cors.init_app(app, origins=app.config['ALLOWED_ORIGINS'],
                  allow_headers=['Content-Type', 'Authorization', 'X-Requested-With'],
                  methods=['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS'])

    # Import socket handlers before init_app so they are kept on the SocketIO
    # instance and re-registered with every server init_app creates
    from carepoint.socket_handlers import notification_handler  # noqa: F401

    # Threading mode keeps the Flask CLI and the test client free of async drivers
    socketio.init_app(app, cors_allowed_origins=app.config['ALLOWED_ORIGINS'], async_mode='threading')

    config_class.init_app(app)

    # Import models so the documents table is registered with SQLAlchemy
    from carepoint.models import document_models  # noqa: F401

    services.init_app(app, **service_overrides)

    # Register blueprints
    from carepoint.api import api_bp
    app.register_blueprint(api_bp, url_prefix='/api')

    # Register error handlers and commands
    register_error_handlers(app)
    register_commands(app)

    # JWT token blocklist checker
    @jwt.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload):
        return services.auth.is_token_revoked(jwt_payload['jti'])

    return app
