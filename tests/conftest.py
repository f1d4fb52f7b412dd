"""
Pytest configuration and fixtures for testing the content backend.
"""

import io
import os
import sys
import pytest
from faker import Faker
from werkzeug.datastructures import FileStorage

# Add the parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app import create_app, db
from app.models.user import User
from app.models.category import Category
from app.services.posts import create_post

fake = Faker()


@pytest.fixture(scope='session')
def app(tmp_path_factory):
    """Create application for testing."""
    upload_dir = tmp_path_factory.mktemp('uploads')
    app = create_app('testing', test_config={'UPLOAD_FOLDER': str(upload_dir)})

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client for each test function."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create a fresh database session for each test."""
    with app.app_context():
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        yield db.session
        db.session.rollback()


def _create_user(password='testpassword123', **overrides):
    """Helper to create a user with sensible defaults."""
    data = {
        'username': fake.user_name() + fake.pystr(min_chars=4, max_chars=6),
        'email': fake.unique.email(),
        'first_name': fake.first_name(),
        'last_name': fake.last_name(),
    }
    data.update(overrides)
    user = User(**data)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return {
        'id': user.id,
        'username': user.username,
        'email': user.email,
        'password': password,
    }


@pytest.fixture
def test_user(app, db_session):
    """Create a test user."""
    return _create_user()


@pytest.fixture
def second_user(app, db_session):
    """Create a second test user for interaction tests."""
    return _create_user(password='testpassword456')


def _get_token(client, email, password):
    """Login and return JWT token."""
    resp = client.post('/api/auth/login', json={
        'email': email,
        'password': password,
    })
    data = resp.get_json()
    if not data or not data.get('token'):
        raise RuntimeError(f"Login failed: status={resp.status_code}, body={data}")
    return data['token']


@pytest.fixture
def auth_headers(client, test_user):
    """Get authentication headers for test user."""
    token = _get_token(client, test_user['email'], test_user['password'])
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def second_auth_headers(client, second_user):
    """Get authentication headers for second user."""
    token = _get_token(client, second_user['email'], second_user['password'])
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def category_tree(db_session):
    """Categories: root -> child -> grandchild, plus an unrelated root.

    Returns a dict of ids keyed 'root', 'child', 'grandchild', 'other'.
    """
    root = Category(name='Lectures')
    other = Category(name='Events')
    db.session.add_all([root, other])
    db.session.commit()

    child = Category(name='Science', parent_id=root.id)
    db.session.add(child)
    db.session.commit()

    grandchild = Category(name='Physics', parent_id=child.id)
    db.session.add(grandchild)
    db.session.commit()

    return {
        'root': root.id,
        'child': child.id,
        'grandchild': grandchild.id,
        'other': other.id,
    }


def make_file(filename='photo.jpg', content=b'\xff\xd8\xff' + b'0' * 32, content_type='image/jpeg'):
    """In-memory upload as the routes receive it."""
    return FileStorage(stream=io.BytesIO(content), filename=filename, content_type=content_type)


@pytest.fixture
def make_post(db_session):
    """Factory creating posts through the write orchestrator."""
    def _make(**overrides):
        data = {
            'title': fake.sentence(nb_words=4),
            'description': fake.paragraph(),
        }
        data.update(overrides)
        files = data.pop('files', None)
        return create_post(data, files)
    return _make


@pytest.fixture
def make_upload():
    """Factory for in-memory uploads."""
    return make_file
