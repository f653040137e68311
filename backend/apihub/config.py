import os
from dotenv import load_dotenv

load_dotenv()

class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", SECRET_KEY)
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Editing sessions keep at most this many characters of the caller's token
    EDITING_SESSION_SECRET_LENGTH = int(os.getenv("EDITING_SESSION_SECRET_LENGTH", 64))

    ACTIVITY_PAGE_SIZE = int(os.getenv("ACTIVITY_PAGE_SIZE", 20))
    CONTENT_JSON_INDENT = int(os.getenv("CONTENT_JSON_INDENT", 2))
    IMPORT_TIMEOUT_SECONDS = float(os.getenv("IMPORT_TIMEOUT_SECONDS", 10))

class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
    SQLALCHEMY_DATABASE_URI = os.getenv("DEV_DATABASE_URI", "sqlite:///apihub-dev.db")

class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI")

class TestingConfig(BaseConfig):
    TESTING = True
    SECRET_KEY = "test-secret"
    JWT_SECRET_KEY = "test-jwt-secret-with-enough-length-for-hs256"
    SQLALCHEMY_DATABASE_URI = "sqlite://"

config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
