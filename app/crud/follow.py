from typing import List, Tuple
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.crud.notification import add_notification
from app.db.models.follow import Block, Follow
from app.db.models.user import User
from app.schemas.user import UserSummary


class AlreadyFollowingError(Exception):
    pass


class AlreadyBlockedError(Exception):
    pass


def is_following(db: Session, follower_id: str, following_id: str) -> bool:
    return db.query(Follow.id).filter(
        Follow.follower_id == follower_id,
        Follow.following_id == following_id,
    ).first() is not None


def follow_user(db: Session, follower_id: str, following_id: str) -> Follow:
    if is_following(db, follower_id, following_id):
        raise AlreadyFollowingError(following_id)

    follow = Follow(follower_id=follower_id, following_id=following_id)
    db.add(follow)
    add_notification(db, user_id=following_id, type="follow", triggered_by=follower_id)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise AlreadyFollowingError(following_id)
    return follow


def unfollow_user(db: Session, follower_id: str, following_id: str) -> None:
    db.query(Follow).filter(
        Follow.follower_id == follower_id,
        Follow.following_id == following_id,
    ).delete(synchronize_session=False)
    db.commit()


def follower_count(db: Session, user_id: str) -> int:
    return db.query(func.count(Follow.id)).filter(Follow.following_id == user_id).scalar()


def following_count(db: Session, user_id: str) -> int:
    return db.query(func.count(Follow.id)).filter(Follow.follower_id == user_id).scalar()


def get_followers(db: Session, user_id: str, page: int, limit: int) -> Tuple[List[UserSummary], int]:
    rows = (
        db.query(User.id, User.name, User.username, User.image)
        .join(Follow, Follow.follower_id == User.id)
        .filter(Follow.following_id == user_id)
        .order_by(Follow.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return [UserSummary.model_validate(row) for row in rows], follower_count(db, user_id)


def get_following(db: Session, user_id: str, page: int, limit: int) -> Tuple[List[UserSummary], int]:
    rows = (
        db.query(User.id, User.name, User.username, User.image)
        .join(Follow, Follow.following_id == User.id)
        .filter(Follow.follower_id == user_id)
        .order_by(Follow.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return [UserSummary.model_validate(row) for row in rows], following_count(db, user_id)


def is_blocking(db: Session, blocker_id: str, blocked_id: str) -> bool:
    return db.query(Block.blocker_id).filter(
        Block.blocker_id == blocker_id,
        Block.blocked_id == blocked_id,
    ).first() is not None


def block_user(db: Session, blocker_id: str, blocked_id: str) -> Block:
    if is_blocking(db, blocker_id, blocked_id):
        raise AlreadyBlockedError(blocked_id)

    block = Block(blocker_id=blocker_id, blocked_id=blocked_id)
    db.add(block)
    # Blocking drops the blocker's follow edge as well
    db.query(Follow).filter(
        Follow.follower_id == blocker_id,
        Follow.following_id == blocked_id,
    ).delete(synchronize_session=False)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise AlreadyBlockedError(blocked_id)
    return block


def unblock_user(db: Session, blocker_id: str, blocked_id: str) -> None:
    db.query(Block).filter(
        Block.blocker_id == blocker_id,
        Block.blocked_id == blocked_id,
    ).delete(synchronize_session=False)
    db.commit()
