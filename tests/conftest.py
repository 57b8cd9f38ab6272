import pytest

import config
from app import app as flask_app

ADMIN_PASSWORD = "s3cret"


@pytest.fixture(autouse=True)
def data_dir(tmp_path, monkeypatch):
    data = tmp_path / "data"
    monkeypatch.setattr(config, "DATA_DIR", data)
    monkeypatch.setattr(config, "POSTS_PATH", data / "posts.json")
    monkeypatch.setattr(config, "COMMENTS_PATH", data / "comments.json")
    monkeypatch.setattr(config, "ABOUT_PATH", data / "about.json")
    monkeypatch.setattr(config, "ADMIN_PATH", data / "admin.json")
    monkeypatch.setattr(config, "UPLOADS_DIR", tmp_path / "uploads")
    monkeypatch.setattr(config, "ADMIN_PASSWORD", ADMIN_PASSWORD)
    return data


@pytest.fixture
def client():
    flask_app.config["TESTING"] = True
    with flask_app.test_client() as c:
        yield c


@pytest.fixture
def admin_headers():
    return {config.ADMIN_HEADER: ADMIN_PASSWORD}
