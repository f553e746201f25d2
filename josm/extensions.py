from flask_login import LoginManager
from flask_sqlalchemy import SQLAlchemy

from josm.storage import PhotoStorage

db = SQLAlchemy()
login_manager = LoginManager()
photo_storage = PhotoStorage()
