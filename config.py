import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = None  # resolved from DATABASE_URL in create_app
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # job card photos
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", os.path.join(BASE_DIR, "uploads"))
    PHOTO_BASE_URL = os.getenv("PHOTO_BASE_URL", "/uploads")
    PHOTO_UPLOAD_WORKERS = int(os.getenv("PHOTO_UPLOAD_WORKERS", "4"))

    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@josm.com")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")
    DEFAULT_PASSWORD = os.getenv("DEFAULT_PASSWORD", "123")


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    LOG_LEVEL = "DEBUG"
