import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Keep the module-level app off the on-disk database during collection
os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite://")
os.environ.setdefault("DISABLE_RATE_LIMITING", "1")

import pytest

from app import create_app
from config import Config
from extensions import db


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    RATELIMIT_ENABLED = False
    GOOGLE_API_KEY = ""
    SHEET_URL_RAW_STUDENTS = ""
    SHEET_URL_PAYMENTS = ""
    SHEET_URL_FINANCE = ""
    RECEIPT_FONT_PATH = ""


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()
