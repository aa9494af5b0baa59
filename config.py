"""
Application Configuration

Centralizes all Flask and application configuration settings.
"""

import os

# Base directory of the application
BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def _env_int(name, default):
    """Read an integer setting from the environment."""
    value = os.environ.get(name)
    if value is None or value == '':
        return default
    return int(value)


class Config:
    """Base configuration class."""

    # Flask settings
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-only-change-in-production')

    # SQLAlchemy settings
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///recipes.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Spoonacular provider settings
    SPOONACULAR_API_KEY = os.environ.get('SPOONACULAR_API_KEY', '')
    SPOONACULAR_BASE_URL = os.environ.get('SPOONACULAR_BASE_URL', 'https://api.spoonacular.com')
    UPSTREAM_TIMEOUT = _env_int('UPSTREAM_TIMEOUT', 10)  # seconds

    # External call budget (free tier: 150 calls per day)
    RATE_BUDGET_QUOTA = _env_int('RATE_BUDGET_QUOTA', 150)
    RATE_BUDGET_WINDOW = _env_int('RATE_BUDGET_WINDOW', 24 * 60 * 60)  # seconds
    RATE_BUDGET_BACKEND = os.environ.get('RATE_BUDGET_BACKEND', 'memory')  # 'memory' or 'database'

    # Search and collection limits
    MAX_PAGE_SIZE = 50
    SEARCH_LOCAL_SHARE = _env_int('SEARCH_LOCAL_SHARE', 6)
    COLLECTION_EXTERNAL_FETCH_CAP = _env_int('COLLECTION_EXTERNAL_FETCH_CAP', 5)


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    RATE_BUDGET_BACKEND = os.environ.get('RATE_BUDGET_BACKEND', 'database')


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SPOONACULAR_API_KEY = 'test-key'
    RATE_BUDGET_BACKEND = 'memory'
    LOG_LEVEL = 'WARNING'


# Configuration dictionary for easy access
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config(env=None):
    """Get configuration based on environment."""
    if env is None:
        env = os.environ.get('FLASK_ENV', 'development')
    return config.get(env, config['default'])
