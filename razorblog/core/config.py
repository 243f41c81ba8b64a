# razorblog/core/config.py

import os


class Config:
    """Settings shared by every environment."""
    # Signs and verifies bearer tokens. Rotating it invalidates every issued token.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    JWT_ALGORITHM = os.getenv('JWT_ALGORITHM', 'HS256')
    JWT_ACCESS_TOKEN_TTL_HOURS = int(os.getenv('JWT_ACCESS_TOKEN_TTL_HOURS', 72))

    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')
    FIREBASE_PROJECT_ID = os.getenv('FIREBASE_PROJECT_ID')


class DevelopmentConfig(Config):
    """Local development. Without JWT_SECRET_KEY a random secret is generated per process."""
    DEBUG = True
    EPHEMERAL_JWT_SECRET = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH', Config.FIREBASE_CREDENTIALS_PATH)


class TestingConfig(Config):
    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = 'testing-secret-key-with-enough-length-for-hs256'
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')


class ProductionConfig(Config):
    DEBUG = False
    # create_app refuses to start when any of these is unset.
    REQUIRED_SETTINGS = ('JWT_SECRET_KEY', 'FIREBASE_CREDENTIALS_PATH')


config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
