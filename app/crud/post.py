"""Feed aggregation: posts joined with their author and live engagement counts."""
import re
from typing import List, Optional, Tuple
from sqlalchemy import case, exists, func, literal, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.db.models.comment import Comment
from app.db.models.hashtag import HASHTAG_MAX_LENGTH, Hashtag
from app.db.models.like import Like
from app.db.models.post import Post
from app.db.models.user import User
from app.schemas.post import PostOut

HASHTAG_PATTERN = re.compile(r"#(\w+)")


def extract_hashtags(content: str) -> List[str]:
    """Return the distinct hashtags in ``content``, lower-cased, without ``#``, in order of appearance.

    Words longer than the hashtag column allows are not treated as tags.
    """
    tags = []
    for match in HASHTAG_PATTERN.findall(content or ""):
        tag = match.lower()
        if len(tag) > HASHTAG_MAX_LENGTH:
            continue
        if tag not in tags:
            tags.append(tag)
    return tags


def like_count_column():
    return (
        select(func.count(Like.id))
        .where(Like.post_id == Post.id)
        .correlate(Post)
        .scalar_subquery()
    )


def comment_count_column():
    return (
        select(func.count(Comment.id))
        .where(Comment.post_id == Post.id)
        .correlate(Post)
        .scalar_subquery()
    )


def is_liked_column(viewer_id: Optional[str]):
    if viewer_id is None:
        return literal(False)
    return exists().where(Like.post_id == Post.id, Like.user_id == viewer_id).correlate(Post)


def post_query(db: Session, viewer_id: Optional[str] = None, *extra_columns):
    """Base projection shared by every post listing."""
    return (
        db.query(
            Post.id,
            Post.user_id,
            Post.content,
            Post.image_url,
            Post.created_at,
            Post.updated_at,
            User.name.label("user_name"),
            User.username,
            User.image.label("user_image"),
            like_count_column().label("like_count"),
            comment_count_column().label("comment_count"),
            is_liked_column(viewer_id).label("is_liked"),
            *extra_columns,
        )
        .join(User, Post.user_id == User.id)
    )


def to_posts(rows) -> List[PostOut]:
    return [PostOut.model_validate(row) for row in rows]


def get_feed(db: Session, viewer_id: Optional[str], page: int, limit: int) -> Tuple[List[PostOut], int]:
    rows = (
        post_query(db, viewer_id)
        .order_by(Post.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    total = db.query(func.count(Post.id)).scalar()
    return to_posts(rows), total


def get_user_posts(
    db: Session, user_id: str, viewer_id: Optional[str], page: int, limit: int
) -> Tuple[List[PostOut], int]:
    rows = (
        post_query(db, viewer_id)
        .filter(Post.user_id == user_id)
        .order_by(Post.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    total = db.query(func.count(Post.id)).filter(Post.user_id == user_id).scalar()
    return to_posts(rows), total


def get_post(db: Session, post_id: str, viewer_id: Optional[str] = None) -> Optional[PostOut]:
    row = post_query(db, viewer_id).filter(Post.id == post_id).first()
    if row is None:
        return None
    return PostOut.model_validate(row)


def _find_hashtag(db: Session, tag: str) -> Optional[Hashtag]:
    return db.query(Hashtag).filter(Hashtag.tag == tag).first()


def _get_or_create_hashtag(db: Session, tag: str) -> Hashtag:
    hashtag = _find_hashtag(db, tag)
    if hashtag is not None:
        return hashtag
    try:
        with db.begin_nested():
            hashtag = Hashtag(tag=tag, post_count=0)
            db.add(hashtag)
    except IntegrityError:
        # Another request inserted the same tag after the lookup
        hashtag = db.query(Hashtag).filter(Hashtag.tag == tag).one()
    return hashtag


def _adjust_post_counts(db: Session, hashtags: List[Hashtag], delta: int) -> None:
    """Apply ``delta`` to each hashtag's post_count in SQL, never going below zero."""
    if not hashtags:
        return
    new_count = Hashtag.post_count + delta
    db.query(Hashtag).filter(Hashtag.id.in_([h.id for h in hashtags])).update(
        {Hashtag.post_count: case((new_count < 0, 0), else_=new_count)},
        synchronize_session=False,
    )


def create_post(db: Session, user_id: str, content: str, image_url: Optional[str] = None) -> Post:
    """Insert a post and link its hashtags in a single transaction."""
    hashtags = [_get_or_create_hashtag(db, tag) for tag in extract_hashtags(content)]
    post = Post(user_id=user_id, content=content, image_url=image_url, hashtags=hashtags)
    db.add(post)
    _adjust_post_counts(db, hashtags, 1)
    db.commit()
    db.refresh(post)
    return post


def delete_post(db: Session, post: Post) -> None:
    """Delete a post together with its comments, likes, notifications and hashtag links."""
    _adjust_post_counts(db, list(post.hashtags), -1)
    db.delete(post)
    db.commit()
