"""Shared fixtures: a throwaway SQLite database and the Flask test client."""
import pytest

from folio import FlaskApp, create_app
from folio.model import ArticleModel, Database
from folio.model.schema import metadata


@pytest.fixture(autouse=True)
def reset_singletons():
    """Every test gets a fresh application and database engine."""
    FlaskApp.reset()
    Database.reset()
    yield
    FlaskApp.reset()
    Database.reset()


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'folio.db'}"


@pytest.fixture
def db(database_url):
    database = Database()
    database.connect(database_url)
    metadata.create_all(database.engine)
    return database


@pytest.fixture
def article_model(db):
    return ArticleModel(db)


@pytest.fixture
def make_article(article_model):
    """Create an article with sensible defaults."""
    def _make(**overrides):
        data = {
            'slug': 'hello-world',
            'locale': 'en',
            'title': 'Hello World',
            'description': 'A first post',
            'body': 'Some *markdown* body.',
            'date': '2025-04-15',
            'tags': ['Blockchain'],
        }
        data.update(overrides)
        return article_model.create_article(data)
    return _make


@pytest.fixture
def app_config(database_url):
    return {
        'TESTING': True,
        'DATABASE_URL': database_url,
        'SECRET_KEY': 'test-secret',
        'ADMIN_USERNAME': 'admin',
        'ADMIN_PASSWORD': None,
        'DEFAULT_LOCALE': 'en',
    }


@pytest.fixture
def app(db, app_config):
    return create_app(app_config)


@pytest.fixture
def client(app):
    return app.test_client()
