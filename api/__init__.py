import logging

from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import DEV_JWT_SECRET, get_config
from .deps import EXTENSION_KEY, Services
from .errors import register_error_handlers
from models import DBStorage, SQLTokenStore, UserStore
from utils.refresh_tokens import RefreshTokenService
from utils.security import AccessTokenCodec, PasswordHasher

logger = logging.getLogger(__name__)

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Chirpy API",
        "version": "1.0.0",
        "description": "REST API for Chirpy user accounts, session tokens and chirps.",
    },
    "basePath": "/",
    "schemes": ["http"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def build_services(config) -> Services:
    """Wire storage and the auth components from a loaded Flask config."""
    storage = DBStorage(config["DATABASE_URL"])
    storage.reload()
    return Services(
        storage=storage,
        users=UserStore(storage),
        passwords=PasswordHasher(
            time_cost=config["PASSWORD_HASH_TIME_COST"],
            memory_cost=config["PASSWORD_HASH_MEMORY_COST"],
            parallelism=config["PASSWORD_HASH_PARALLELISM"],
        ),
        access_tokens=AccessTokenCodec(config["JWT_SECRET"], issuer=config["JWT_ISSUER"]),
        refresh_tokens=RefreshTokenService(SQLTokenStore(storage), window=config["REFRESH_TOKEN_EXPIRES"]),
    )


def create_app(config=None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    `config` is a config name ("dev", "test", "prod"), a config class, or None
    to select by APP_ENV.
    """
    app = Flask(__name__)

    if config is None or isinstance(config, str):
        config = get_config(config)
    app.config.from_object(config)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not app.debug and not app.testing and app.config["JWT_SECRET"] == DEV_JWT_SECRET:
        raise RuntimeError("JWT_SECRET must be set outside development")

    # Cross-Origin Resource Sharing: enable for dev, configurable for prod
    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})

    # Swagger UI and JSON
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    # Register global error handlers that return the uniform error envelope
    register_error_handlers(app)

    services = build_services(app.config)
    app.extensions[EXTENSION_KEY] = services

    from .health import bp as health_bp
    from .users import bp as users_bp
    from .auth import bp as auth_bp
    from .admin import bp as admin_bp
    from .chirps import bp as chirps_bp

    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(users_bp, url_prefix="/api")
    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(chirps_bp, url_prefix="/api")
    app.register_blueprint(admin_bp, url_prefix="/admin")

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        services.storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to Chirpy API",
            "docs": "/apidocs/",
            "health": "/api/healthz",
        }, 200

    logger.info("chirpy app created (platform=%s)", app.config["PLATFORM"])
    return app
