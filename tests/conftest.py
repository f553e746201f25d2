import pytest

from config import TestConfig
from josm import create_app
from josm.extensions import db
from josm.models import User

PASSWORD = "secret"

USERS = {
    "store_keeper": ("Store Keeper", "storekeeper@josm.com"),
    "supervisor": ("Supervisor John", "supervisor@josm.com"),
    "worker": ("Worker Sam", "worker@josm.com"),
    "sales_warehouse": ("Sales Manager", "sales@josm.com"),
}


@pytest.fixture
def app(tmp_path):
    class Config(TestConfig):
        UPLOAD_FOLDER = str(tmp_path / "uploads")
        ADMIN_PASSWORD = PASSWORD

    app = create_app(Config)
    with app.app_context():
        for role, (name, email) in USERS.items():
            u = User(name=name, email=email, role=role, active=True)
            u.set_password(PASSWORD)
            db.session.add(u)
        db.session.commit()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def user(ctx):
    def _get(role):
        return User.query.filter_by(role=role).first()
    return _get


@pytest.fixture
def login(client):
    def _login(role):
        email = TestConfig.ADMIN_EMAIL if role == "admin" else USERS[role][1]
        resp = client.post("/auth/login", json={"email": email, "password": PASSWORD})
        assert resp.status_code == 200, resp.get_json()
        return client
    return _login
