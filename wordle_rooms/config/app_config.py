"""
Configuration Management Module

Centralized configuration management following the 12-factor app methodology.
All configuration is loaded from environment variables with sensible defaults.
"""

import os
from dotenv import load_dotenv

# Load environment variables from an optional config.env beside this module
load_dotenv(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.env'))


class Config:
    """Base configuration class with all settings."""

    # Flask Settings
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    TESTING = False

    # Server Settings
    HOST = os.getenv('HOST', '127.0.0.1')
    PORT = int(os.getenv('PORT', 5000))
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')

    # Game Settings
    MAX_ROUNDS = int(os.getenv('MAX_ROUNDS', 6))
    ROUNDS_PER_GAME = int(os.getenv('ROUNDS_PER_GAME', 5))
    DEFAULT_MAX_PLAYERS = int(os.getenv('DEFAULT_MAX_PLAYERS', 4))
    MAX_PLAYERS_LIMIT = int(os.getenv('MAX_PLAYERS_LIMIT', 8))
    ROUND_ADVANCE_POLICY = os.getenv('ROUND_ADVANCE_POLICY', 'auto')

    # Cleanup Settings
    ROOM_INACTIVE_MINUTES = int(os.getenv('ROOM_INACTIVE_MINUTES', 30))
    FINISHED_ROOM_MINUTES = int(os.getenv('FINISHED_ROOM_MINUTES', 60))
    PLAYER_GRACE_MINUTES = int(os.getenv('PLAYER_GRACE_MINUTES', 5))
    CLEANUP_INTERVAL_SECONDS = int(os.getenv('CLEANUP_INTERVAL_SECONDS', 60))

    # Logging Settings
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = True


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
