import pytest
from flask_jwt_extended import create_access_token
from werkzeug.security import generate_password_hash

from lending import create_app
from lending.config import Config
from lending.extensions import db
from lending.models.book import Book
from lending.models.resident import Resident
from lending.models.user import User


class LendingTestConfig(Config):
    TESTING = True
    SCHEDULER_ENABLED = False
    MAIL_SUPPRESS_SEND = True
    JWT_SECRET_KEY = "test-jwt-secret-key-that-is-long-enough-for-hs256"
    SQLALCHEMY_ENGINE_OPTIONS = {"connect_args": {"check_same_thread": False, "timeout": 15}}


@pytest.fixture
def app(tmp_path):
    # one sqlite file per test
    db_file = tmp_path / "lending_test.db"
    config = type("Cfg", (LendingTestConfig,), {"SQLALCHEMY_DATABASE_URI": f"sqlite:///{db_file}"})
    app = create_app(config)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield


@pytest.fixture
def engine(app):
    return app.extensions["transaction_engine"]


@pytest.fixture
def make_book(app):
    def _make(copies=1, title="Dune", author="Frank Herbert", **kwargs):
        with app.app_context():
            book = Book(title=title, author=author, available_copies=copies, **kwargs)
            db.session.add(book)
            db.session.commit()
            return book.id
    return _make


@pytest.fixture
def make_resident(app):
    def _make(first_name="Ada", last_name="Lovelace", **kwargs):
        with app.app_context():
            resident = Resident(first_name=first_name, last_name=last_name, **kwargs)
            db.session.add(resident)
            db.session.commit()
            return resident.id
    return _make


@pytest.fixture
def make_user(app):
    counter = {"n": 0}

    def _make(role="librarian", password="secret", username=None):
        counter["n"] += 1
        username = username or f"{role}{counter['n']}"
        with app.app_context():
            user = User(
                username=username,
                email=f"{username}@library.local",
                password_hash=generate_password_hash(password),
                role=role,
            )
            db.session.add(user)
            db.session.commit()
            return user.id
    return _make


@pytest.fixture
def headers_for(app, make_user):
    def _headers(role="librarian"):
        user_id = make_user(role)
        with app.app_context():
            token = create_access_token(identity=str(user_id), additional_claims={"role": role})
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture
def staff_headers(headers_for):
    return headers_for("librarian")


@pytest.fixture
def admin_headers(headers_for):
    return headers_for("admin")


@pytest.fixture
def copies(app):
    """Fresh available_copies straight from the database."""
    def _copies(book_id):
        with app.app_context():
            return db.session.scalar(db.select(Book.available_copies).where(Book.id == book_id))
    return _copies
