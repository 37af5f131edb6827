import pytest
from sqlalchemy import text

from movie_reviews import create_app


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'test.db'}",
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def stores(app):
    return app.extensions["movie_reviews"]


@pytest.fixture
def engine(stores):
    return stores["reviews"].engine


@pytest.fixture
def make_user(engine):
    def insert_user(username, email, password="2020"):
        with engine.begin() as conn:
            res = conn.execute(text("""
                INSERT INTO users (username, email, password_hash)
                VALUES (:username, :email, :password)
            """), {"username": username, "email": email, "password": password})
            return res.lastrowid
    return insert_user


@pytest.fixture
def user_id(make_user):
    return make_user("malachi", "m.spencer@makers.com")
