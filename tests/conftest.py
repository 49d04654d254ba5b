from datetime import datetime, timezone

import pytest

from forum import create_app
from forum.extensions import db
from config import Config
from forum.models import User, Forum, ForumTopic, ForumPost, UserPermission


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret-key"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    AUTO_CREATE_DB = False
    ADMIN_USERNAMES = set()
    LATEST_POSTS_DAYS = 3
    DEFAULT_PAGE_SIZE = 25
    MAX_PAGE_SIZE = 100


@pytest.fixture
def app():
    app = create_app(TestConfig)

    with app.app_context():
        db.drop_all()
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def add_user(app):
    def _add_user(username, **fields):
        user = User(username=username, **fields)
        user.set_password("password123")
        db.session.add(user)
        db.session.flush()
        return user
    return _add_user


@pytest.fixture
def add_forum(app):
    def _add_forum(name="Test Forum", restricted=False):
        forum = Forum(name=name, restricted=restricted)
        db.session.add(forum)
        db.session.flush()
        return forum
    return _add_forum


@pytest.fixture
def add_topic(app, add_forum):
    def _add_topic(poster, forum=None, title="Test Topic", is_locked=False):
        if forum is None:
            forum = add_forum()
        topic = ForumTopic(title=title, is_locked=is_locked, forum_id=forum.id, poster_id=poster.id)
        db.session.add(topic)
        db.session.flush()
        return topic
    return _add_topic


@pytest.fixture
def add_post(app):
    def _add_post(topic, poster, text="Test post", created=None, **fields):
        post = ForumPost(
            topic_id=topic.id,
            poster_id=poster.id,
            text=text,
            create_timestamp=created or datetime.now(timezone.utc),
            **fields,
        )
        db.session.add(post)
        db.session.flush()
        return post
    return _add_post


@pytest.fixture
def grant(app):
    def _grant(user, *permissions):
        for permission in permissions:
            db.session.add(UserPermission(user_id=user.id, permission=permission))
        db.session.flush()
    return _grant
