"""
Local configuration read by app/settings.py.

Values come from the environment so the same file works in development,
CI and production. Anything unset falls back to a development default.
"""
import os

SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-only-insecure-secret-key')
DEBUG = os.environ.get('DEBUG', '1') == '1'
ALLOWED_HOSTS = [h for h in os.environ.get('ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',') if h]

DATABASE_NAME = os.environ.get('DATABASE_NAME', 'pokemarket')
DATABASE_USER = os.environ.get('DATABASE_USER', 'pokemarket')
DATABASE_PASSWORD = os.environ.get('DATABASE_PASSWORD', 'password')
DATABASE_HOST = os.environ.get('DATABASE_HOST', 'localhost')
DATABASE_PORT = os.environ.get('DATABASE_PORT', '5432')

REDIS_URL = os.environ.get('REDIS_URL', 'redis://localhost:6379/0')

SECURE_SSL_REDIRECT = os.environ.get('SECURE_SSL_REDIRECT', '1') == '1'

# Auction tuning
ANTI_SNIPE_WINDOW_MINUTES = int(os.environ.get('ANTI_SNIPE_WINDOW_MINUTES', '2'))
BID_MAX_ATTEMPTS = int(os.environ.get('BID_MAX_ATTEMPTS', '3'))
