import os

from werkzeug.utils import secure_filename


class PhotoStorage:
    """Object storage for job card photos.

    Files are written below ``UPLOAD_FOLDER`` and exposed under
    ``PHOTO_BASE_URL``. Mirrors the Flask extension pattern so the app
    factory can bind it like ``db`` and ``login_manager``.
    """

    def __init__(self, app=None):
        self.root = None
        self.base_url = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.root = app.config["UPLOAD_FOLDER"]
        self.base_url = app.config.get("PHOTO_BASE_URL", "/uploads").rstrip("/")
        os.makedirs(self.root, exist_ok=True)
        app.extensions["photo_storage"] = self

    def upload(self, file, path: str) -> str:
        parts = [secure_filename(p) for p in path.split("/") if p]
        parts = [p for p in parts if p]
        if not parts:
            raise ValueError(f"invalid storage path: {path!r}")

        target = os.path.join(self.root, *parts)
        os.makedirs(os.path.dirname(target), exist_ok=True)
        file.save(target)
        return f"{self.base_url}/{'/'.join(parts)}"
