import os
from datetime import timedelta


def _env_flag(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    # Database
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///coachdesk.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'change-me-in-production')
    JWT_ALGORITHM = 'HS256'
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=24)
    JWT_TOKEN_LOCATION = ['headers', 'cookies']
    JWT_ACCESS_COOKIE_NAME = 'access_token_cookie'
    JWT_COOKIE_CSRF_PROTECT = False
    JWT_COOKIE_SECURE = False

    CORS_ORIGINS = os.getenv('CORS_ORIGINS', 'http://localhost:3000').split(',')

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Requests without a coach identity act as the first coach in the database.
    # Single-coach deployments rely on this until sign-in is wired up.
    COACH_FALLBACK_ENABLED = _env_flag('COACH_FALLBACK_ENABLED', True)

    # Email
    SENDGRID_API_KEY = os.getenv('SENDGRID_API_KEY')
    SENDGRID_API_URL = 'https://api.sendgrid.com/v3/mail/send'
    EMAIL_FROM = os.getenv('EMAIL_FROM', 'Cannoli Trainer <noreply@cannoli.mattalldian.com>')
    EMAIL_TIMEOUT_SECONDS = 10
    APP_URL = os.getenv('APP_URL', 'http://localhost:3000')

    # Notifications
    MESSAGE_NOTIFICATION_DELAY_SECONDS = int(os.getenv('MESSAGE_NOTIFICATION_DELAY_SECONDS', '300'))

    # Flask-APScheduler. Persisted jobs share the app database engine.
    SCHEDULER_TIMEZONE = 'UTC'
    SCHEDULER_AUTOSTART = True
    SCHEDULER_PERSIST_JOBS = True
    SCHEDULER_API_ENABLED = False
    SCHEDULER_JOBSTORE_TABLE = 'scheduled_jobs'
    SCHEDULER_JOB_DEFAULTS = {
        'coalesce': True,
        'misfire_grace_time': 3600,
    }


class DevelopmentConfig(Config):
    DEBUG = True


class ProductionConfig(Config):
    DEBUG = False
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL')
    COACH_FALLBACK_ENABLED = _env_flag('COACH_FALLBACK_ENABLED', False)
    PREFERRED_URL_SCHEME = 'https'
    JWT_COOKIE_SECURE = True


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    JWT_SECRET_KEY = 'testing-secret-key-with-enough-length'
    COACH_FALLBACK_ENABLED = True
    SENDGRID_API_KEY = None
    SCHEDULER_AUTOSTART = False
    SCHEDULER_PERSIST_JOBS = False


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
