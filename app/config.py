"""Application configuration classes.

Values are read from the environment (a local .env file is loaded by
python-dotenv in ``app/__init__.py``).
"""

import os
import tempfile


def _database_url(default):
    url = os.getenv('DATABASE_URL', default)
    # Render/Heroku still hand out postgres:// URLs
    if url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)
    return url


class Config:
    """Base configuration shared by every environment."""

    SQLALCHEMY_DATABASE_URI = _database_url('sqlite:///content.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'dev-secret')
    JWT_EXPIRES_HOURS = int(os.getenv('JWT_EXPIRES_HOURS', 24))

    # 'local' writes under UPLOAD_FOLDER, 'supabase' uses Supabase Storage
    STORAGE_BACKEND = os.getenv('STORAGE_BACKEND', 'local')
    UPLOAD_FOLDER = os.getenv('UPLOAD_FOLDER', os.path.join(os.getcwd(), 'uploads'))
    SUPABASE_URL = os.getenv('SUPABASE_URL')
    SUPABASE_SERVICE_KEY = os.getenv('SUPABASE_SERVICE_KEY')
    SUPABASE_BUCKET = os.getenv('SUPABASE_BUCKET', 'post-media')

    MAX_UPLOAD_SIZE = int(os.getenv('MAX_UPLOAD_SIZE', 100000000))  # per file, bytes

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'DEBUG')


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    JWT_SECRET_KEY = 'test-secret-key-for-testing'
    STORAGE_BACKEND = 'local'
    UPLOAD_FOLDER = os.path.join(tempfile.gettempdir(), 'content-backend-test-uploads')
    MAX_UPLOAD_SIZE = 1024 * 1024


class ProductionConfig(Config):
    DEBUG = False


config_by_name = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
}
