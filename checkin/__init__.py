from flask import Flask
from flask_cors import CORS
from dotenv import load_dotenv
import os
from checkin.extensions import db, migrate, jwt, limiter
from checkin.routes import register_error_handlers
from checkin.utils.clock import SystemClock
from datetime import timedelta
import logging

# Load environment variables
load_dotenv()


def create_app(config_overrides=None):
    app = Flask(__name__)

    # Set testing mode from environment variable
    app.config["TESTING"] = os.getenv("FLASK_ENV") in ["development", "testing"]

    # Configure logging
    logging.basicConfig(level=logging.INFO)
    app.logger.setLevel(logging.INFO)

    # Configure database
    app.config["SQLALCHEMY_DATABASE_URI"] = os.getenv(
        "DATABASE_URL", "postgresql://localhost/checkin"
    )
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False

    # Configure JWT
    app.config["JWT_SECRET_KEY"] = os.getenv("JWT_SECRET_KEY", "your-secret-key")
    app.config["JWT_ACCESS_TOKEN_EXPIRES"] = timedelta(days=1)
    app.config["JWT_TOKEN_LOCATION"] = ["headers"]
    app.config["JWT_HEADER_NAME"] = "Authorization"
    app.config["JWT_HEADER_TYPE"] = "Bearer"

    # Rate limiting
    app.config["RATELIMIT_STORAGE_URI"] = os.getenv("LIMITER_STORAGE_URL", "memory://")

    # "Today" for registration dates is taken in this zone
    app.config["CHECKIN_TIMEZONE"] = os.getenv("CHECKIN_TIMEZONE", "UTC")

    if config_overrides:
        app.config.update(config_overrides)

    if "CLOCK" not in app.config:
        app.config["CLOCK"] = SystemClock(app.config["CHECKIN_TIMEZONE"])

    # Initialize Flask extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    limiter.init_app(app)

    # Register blueprints
    from checkin.routes.event_routes import event_bp
    from checkin.routes.attendee_routes import attendee_bp
    from checkin.routes.import_routes import import_bp
    from checkin.routes.analytics_routes import analytics_bp

    app.register_blueprint(event_bp, url_prefix="/api")
    app.register_blueprint(attendee_bp, url_prefix="/api")
    app.register_blueprint(import_bp, url_prefix="/api")
    app.register_blueprint(analytics_bp, url_prefix="/api")
    register_error_handlers(app)

    # Set up CORS
    cors_origins = os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5001",
    ).split(",")
    app.logger.info(f"Initializing CORS with origins: {cors_origins}")

    CORS(
        app,
        resources={
            r"/api/*": {"origins": cors_origins},
        },
        supports_credentials=True,
        methods=["GET", "POST", "PUT", "PATCH", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept"],
        expose_headers=["Content-Type"],
    )

    # Make models known to the metadata before create_all / migrations
    from checkin import models  # noqa: F401

    return app
