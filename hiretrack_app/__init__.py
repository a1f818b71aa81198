"""
Flask application factory for HireTrack.
"""
import logging
import os
import time
from flask import Flask


def create_app(config_name='default'):
    """Create and configure the Flask application."""
    from flask import g, jsonify, request
    from werkzeug.exceptions import HTTPException

    from hiretrack_app.config import config
    from hiretrack_app.extensions import login_manager, migrate
    from hiretrack_app.models import db, User
    from hiretrack_app.services.virus_scan import scanner
    from hiretrack_app.utils.auth import load_user_from_request

    app = Flask(__name__)
    app.config.from_object(config[config_name])

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )
    logger = logging.getLogger(__name__)

    # Class attributes are evaluated at import time; the platform may inject
    # DATABASE_URL later
    database_url = os.environ.get('DATABASE_URL')
    if database_url and not app.config.get('TESTING'):
        app.config['SQLALCHEMY_DATABASE_URI'] = database_url

    # Handle PostgreSQL URL format from Heroku/Railway
    if app.config['SQLALCHEMY_DATABASE_URI'].startswith('postgres://'):
        app.config['SQLALCHEMY_DATABASE_URI'] = app.config['SQLALCHEMY_DATABASE_URI'].replace(
            'postgres://', 'postgresql://', 1
        )

    db_uri = app.config['SQLALCHEMY_DATABASE_URI']
    db_type = 'postgresql' if 'postgresql' in db_uri else 'sqlite' if 'sqlite' in db_uri else 'unknown'
    logger.info("[APP INIT] config=%s db=%s", config_name, db_type)

    if hasattr(config[config_name], 'init_app'):
        config[config_name].init_app(app)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    scanner.init_app(app)

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, user_id)

    login_manager.request_loader(load_user_from_request)

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'error': 'Authentication required'}), 401

    # Register blueprints
    from hiretrack_app.api import (
        auth_api, jobs_api, applicants_api, reviews_api, offers_api, interviews_api, events_api,
        notifications_api, users_api, offices_api, settings_api, dashboard_api, files_api,
    )

    app.register_blueprint(auth_api.bp)
    app.register_blueprint(jobs_api.bp)
    app.register_blueprint(applicants_api.bp)
    app.register_blueprint(reviews_api.bp)
    app.register_blueprint(offers_api.bp)
    app.register_blueprint(interviews_api.bp)
    app.register_blueprint(events_api.bp)
    app.register_blueprint(notifications_api.bp)
    app.register_blueprint(users_api.bp)
    app.register_blueprint(offices_api.bp)
    app.register_blueprint(settings_api.bp)
    app.register_blueprint(dashboard_api.bp)
    app.register_blueprint(files_api.bp)

    @app.route('/api/health')
    def health():
        return jsonify({'status': 'ok'})

    # Register error handlers
    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(413)
    def too_large(error):
        return jsonify({'error': 'Upload too large'}), 413

    @app.errorhandler(HTTPException)
    def http_error(error):
        return jsonify({'error': error.description}), error.code

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        logger.error("Unhandled error on %s %s", request.method, request.path,
                     exc_info=getattr(error, 'original_exception', None))
        return jsonify({'error': 'Internal server error'}), 500

    # Request logging
    @app.before_request
    def start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def log_request(response):
        if request.path != '/api/health':
            elapsed_ms = (time.perf_counter() - g.get('request_started', time.perf_counter())) * 1000
            logger.info("%s %s %s %.1fms", request.method, request.path, response.status_code, elapsed_ms)
        return response

    # Database initialization
    @app.before_request
    def ensure_tables():
        """Ensure database tables exist."""
        if not hasattr(app, '_db_initialized'):
            db.create_all()
            app._db_initialized = True

    return app


# NOTE: Do NOT create app at module level!
# Use wsgi.py as the entry point for gunicorn.
