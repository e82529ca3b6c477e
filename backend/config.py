import os
from datetime import timedelta
from dotenv import load_dotenv

# Load .env file
load_dotenv()


def _split_origins(raw):
    return [origin.strip() for origin in raw.split(',') if origin.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'hard-to-guess-string'
    # Fallback to SQLite for local development if no URL provided
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///kube.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Bearer tokens: HS256, 7 day lifetime
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET') or 'kube-default-jwt-secret-change-in-env'
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=7)

    CORS_ORIGINS = _split_origins(
        os.environ.get('CORS_ORIGINS', 'https://kubesystems.vercel.app,http://localhost:3000')
    )

    # Thread pool size for dashboard fan-out queries
    DASHBOARD_QUERY_WORKERS = int(os.environ.get('DASHBOARD_QUERY_WORKERS', 8))

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    API_VERSION = '1.0.0'


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    JWT_SECRET_KEY = 'kube-test-secret-key-for-hs256-signing'
    DASHBOARD_QUERY_WORKERS = 4
