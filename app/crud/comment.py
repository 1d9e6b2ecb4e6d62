from typing import List, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session
from app.crud.notification import add_notification
from app.db.models.comment import Comment
from app.db.models.post import Post
from app.db.models.user import User
from app.schemas.comment import CommentOut


def _comment_query(db: Session):
    return (
        db.query(
            Comment.id,
            Comment.post_id,
            Comment.user_id,
            Comment.content,
            Comment.created_at,
            Comment.updated_at,
            User.name,
            User.username,
            User.image,
        )
        .join(User, Comment.user_id == User.id)
    )


def get_comments(db: Session, post_id: str, page: int, limit: int) -> Tuple[List[CommentOut], int]:
    rows = (
        _comment_query(db)
        .filter(Comment.post_id == post_id)
        .order_by(Comment.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    total = db.query(func.count(Comment.id)).filter(Comment.post_id == post_id).scalar()
    return [CommentOut.model_validate(row) for row in rows], total


def get_comment(db: Session, comment_id: str) -> CommentOut:
    return CommentOut.model_validate(_comment_query(db).filter(Comment.id == comment_id).one())


def create_comment(db: Session, post: Post, user_id: str, content: str) -> Comment:
    """Insert the comment and notify the post author in the same commit."""
    comment = Comment(post_id=post.id, user_id=user_id, content=content)
    db.add(comment)
    add_notification(db, user_id=post.user_id, type="comment", triggered_by=user_id, post_id=post.id)
    db.commit()
    db.refresh(comment)
    return comment
