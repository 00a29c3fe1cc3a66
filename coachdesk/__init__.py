import logging
import os

from apscheduler.jobstores.sqlalchemy import SQLAlchemyJobStore
from flask import Flask

from coachdesk.config import config
from coachdesk.extensions import cors, db, jwt, ma, migrate, scheduler


def configure_scheduler(app):
    """Give the scheduler a job store on the app database engine and start it."""
    if scheduler.running:
        return

    if app.config.get('SCHEDULER_PERSIST_JOBS'):
        with app.app_context():
            engine = db.engine
        app.config['SCHEDULER_JOBSTORES'] = {
            'default': SQLAlchemyJobStore(engine=engine, tablename=app.config['SCHEDULER_JOBSTORE_TABLE']),
        }
    scheduler.init_app(app)

    if app.config.get('SCHEDULER_AUTOSTART'):
        scheduler.start()
        app.logger.info("Background scheduler started")


def create_app(config_name=None):
    config_name = config_name or os.getenv('FLASK_CONFIG', 'default')

    app = Flask(__name__)
    app.config.from_object(config[config_name])
    app.logger.setLevel(getattr(logging, str(app.config['LOG_LEVEL']).upper(), logging.INFO))

    db.init_app(app)
    migrate.init_app(app, db)
    ma.init_app(app)
    jwt.init_app(app)
    cors.init_app(app, resources={r"/api/*": {
        "origins": app.config['CORS_ORIGINS'],
        "allow_headers": ["Content-Type", "Authorization"],
        "methods": ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    }}, supports_credentials=True)

    configure_scheduler(app)

    from coachdesk.cli import register_commands
    from coachdesk.errors import register_error_handlers
    from coachdesk.routes import register_blueprints

    register_error_handlers(app)
    register_blueprints(app)
    register_commands(app)

    return app
