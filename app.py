import os
import logging
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from analyzers.analysis_engine import AnalysisConfig, AnalysisEngine

# Configure logging
logging.basicConfig(level=os.environ.get("LOG_LEVEL", "DEBUG").upper())


def load_config():
    """Settings read from the environment"""
    return {
        "SECRET_KEY": os.environ.get("SESSION_SECRET", "dev-secret-key-change-in-production"),
        "SQLALCHEMY_DATABASE_URI": os.environ.get("DATABASE_URL", "sqlite:///data_analysis.db"),
        "SQLALCHEMY_ENGINE_OPTIONS": {
            "pool_recycle": 300,
            "pool_pre_ping": True,
        },
        "MAX_CONTENT_LENGTH": int(os.environ.get("MAX_CONTENT_LENGTH", 5 * 1024 * 1024)),  # 5MB
        "UPLOAD_FOLDER": os.environ.get("UPLOAD_FOLDER", "uploads"),
        "EXPORT_FOLDER": os.environ.get("EXPORT_FOLDER", "exports"),
        "ANALYSIS_MAX_ROWS": int(os.environ.get("ANALYSIS_MAX_ROWS", 10000)),
        "ANALYSIS_FORECAST_HORIZON": int(os.environ.get("ANALYSIS_FORECAST_HORIZON", 3)),
        "ANALYSIS_TOP_N": int(os.environ.get("ANALYSIS_TOP_N", 3)),
        "ANALYSIS_WORKERS": int(os.environ.get("ANALYSIS_WORKERS", 4)),
    }


def create_app(config=None):
    """Application factory pattern"""
    app = Flask(__name__)
    app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1, x_host=1)

    app.config.update(load_config())
    if config:
        app.config.update(config)

    # Create upload/export directories if they don't exist
    os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)
    os.makedirs(app.config['EXPORT_FOLDER'], exist_ok=True)

    # Initialize extensions
    from models import db
    db.init_app(app)

    # One engine (and transform pool) per app, shared by requests
    app.extensions['analysis_engine'] = AnalysisEngine(AnalysisConfig.from_mapping(app.config))

    # Register routes
    from routes import register_routes
    register_routes(app)

    with app.app_context():
        # Create all database tables
        db.create_all()

    return app
