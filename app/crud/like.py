from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.crud.notification import add_notification
from app.db.models.like import Like
from app.db.models.post import Post


class AlreadyLikedError(Exception):
    pass


def count_likes(db: Session, post_id: str) -> int:
    return db.query(func.count(Like.id)).filter(Like.post_id == post_id).scalar()


def has_liked(db: Session, user_id: str, post_id: str) -> bool:
    return db.query(Like.id).filter(
        Like.user_id == user_id,
        Like.post_id == post_id
    ).first() is not None


def like_post(db: Session, post: Post, user_id: str) -> Like:
    if has_liked(db, user_id, post.id):
        raise AlreadyLikedError(post.id)

    new_like = Like(user_id=user_id, post_id=post.id)
    db.add(new_like)
    add_notification(db, user_id=post.user_id, type="like", triggered_by=user_id, post_id=post.id)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent request inserted the same (user, post) pair first
        db.rollback()
        raise AlreadyLikedError(post.id)
    return new_like


def unlike_post(db: Session, post_id: str, user_id: str) -> int:
    deleted = db.query(Like).filter(
        Like.user_id == user_id,
        Like.post_id == post_id
    ).delete(synchronize_session=False)
    db.commit()
    return deleted
