"""
Application configuration.

Values come from the environment; a ``.env`` file in the project root is
loaded first so local runs can keep credentials out of the shell.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[2]

load_dotenv(PROJECT_ROOT / '.env')


def _database_url():
    url = os.environ.get('DATABASE_URL', '')
    if not url:
        return f"sqlite:///{PROJECT_ROOT / 'pos_database.db'}"
    # Hosted Postgres providers still hand out postgres:// URLs
    if url.startswith('postgres://'):
        url = 'postgresql://' + url[len('postgres://'):]
    return url


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'change-me-in-production')
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {'pool_pre_ping': True}

    CORS_ORIGINS = [o.strip() for o in os.environ.get('CORS_ORIGINS', '*').split(',') if o.strip()]

    RATE_LIMIT_PER_MINUTE = int(os.environ.get('RATE_LIMIT_PER_MINUTE', 60))
    SUMMARY_CACHE_TTL = int(os.environ.get('SUMMARY_CACHE_TTL', 300))
    SUMMARY_CACHE_SIZE = int(os.environ.get('SUMMARY_CACHE_SIZE', 100))

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_FILE = os.environ.get('LOG_FILE', '')

    SEED_SAMPLE_DATA = os.environ.get('SEED_SAMPLE_DATA', 'false').lower() == 'true'


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    RATE_LIMIT_PER_MINUTE = 1000
    LOG_FILE = ''
    SEED_SAMPLE_DATA = False
