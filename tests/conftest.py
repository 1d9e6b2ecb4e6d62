import os
import itertools
from datetime import datetime, timedelta
from types import SimpleNamespace

# Point the app at a throwaway in-memory database before it is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient

from main import app
from app.core.security import create_access_token
from app.crud import post as post_crud
from app.db.base import Base
from app.db.models.comment import Comment
from app.db.models.follow import Block, Follow
from app.db.models.like import Like
from app.db.models.message import Message
from app.db.models.post import Post
from app.db.models.user import User
from app.db.session import SessionLocal, engine

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


def auth_headers(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}


def minutes(n: int) -> datetime:
    """A fixed timestamp ``n`` minutes after BASE_TIME, for deterministic ordering."""
    return BASE_TIME + timedelta(minutes=n)


@pytest.fixture
def client():
    """Test client over a freshly created schema."""
    Base.metadata.drop_all(bind=engine)
    with TestClient(app) as test_client:
        yield test_client
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(client):
    session = SessionLocal()
    yield session
    session.close()


def _insert(obj):
    session = SessionLocal()
    try:
        session.add(obj)
        session.commit()
        return obj.id
    finally:
        session.close()


@pytest.fixture
def create_user(client):
    counter = itertools.count(1)

    def _create_user(name=None, username=None, bio=None, created_at=None):
        n = next(counter)
        user_id = _insert(User(
            name=name or f"User {n}",
            username=username or f"user{n}",
            email=f"user{n}@example.com",
            password="unused-password-hash",
            bio=bio,
            created_at=created_at or minutes(n),
        ))
        return SimpleNamespace(id=user_id, username=username or f"user{n}", headers=auth_headers(user_id))

    return _create_user


@pytest.fixture
def create_post(client):
    def _create_post(author, content="hello world", created_at=None, image_url=None):
        session = SessionLocal()
        try:
            post = post_crud.create_post(session, author.id, content, image_url)
            if created_at is not None:
                post.created_at = created_at
                session.commit()
            return post.id
        finally:
            session.close()

    return _create_post


@pytest.fixture
def add_like(client):
    def _add_like(user, post_id):
        return _insert(Like(user_id=user.id, post_id=post_id))

    return _add_like


@pytest.fixture
def add_comment(client):
    def _add_comment(user, post_id, content="nice", created_at=None):
        return _insert(Comment(post_id=post_id, user_id=user.id, content=content, created_at=created_at or datetime.utcnow()))

    return _add_comment


@pytest.fixture
def add_follow(client):
    def _add_follow(follower, following, created_at=None):
        return _insert(Follow(follower_id=follower.id, following_id=following.id, created_at=created_at or datetime.utcnow()))

    return _add_follow


@pytest.fixture
def add_block(client):
    def _add_block(blocker, blocked):
        session = SessionLocal()
        try:
            session.add(Block(blocker_id=blocker.id, blocked_id=blocked.id))
            session.commit()
        finally:
            session.close()

    return _add_block


@pytest.fixture
def add_message(client):
    def _add_message(sender, recipient, content="hi", created_at=None, is_read=False):
        return _insert(Message(
            sender_id=sender.id,
            recipient_id=recipient.id,
            content=content,
            created_at=created_at or datetime.utcnow(),
            is_read=is_read,
        ))

    return _add_message


@pytest.fixture
def alice(create_user):
    return create_user(name="Alice Liddell", username="alice", bio="Curious traveller")


@pytest.fixture
def bob(create_user):
    return create_user(name="Bob Builder", username="bob", bio="Can we fix it")


@pytest.fixture
def carol(create_user):
    return create_user(name="Carol Danvers", username="carol")
