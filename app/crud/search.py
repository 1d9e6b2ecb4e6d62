from typing import List, Optional, Tuple
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session
from app.crud.post import post_query, to_posts
from app.db.models.follow import Follow
from app.db.models.hashtag import Hashtag, post_hashtags
from app.db.models.post import Post
from app.db.models.user import User
from app.schemas.hashtag import HashtagOut
from app.schemas.post import PostOut
from app.schemas.user import UserSummary, UserWithFollowers

SEARCH_TYPES = ("all", "users", "posts", "hashtags")


def follower_count_column():
    return (
        select(func.count(Follow.id))
        .where(Follow.following_id == User.id)
        .correlate(User)
        .scalar_subquery()
    )


def normalize_tag(tag: str) -> str:
    return tag.strip().lstrip("#").lower()


def search_users(db: Session, query: str, limit: int) -> List[UserWithFollowers]:
    rows = (
        db.query(
            User.id,
            User.name,
            User.username,
            User.image,
            User.bio,
            follower_count_column().label("follower_count"),
        )
        .filter(or_(
            User.name.icontains(query, autoescape=True),
            User.username.icontains(query, autoescape=True),
            User.bio.icontains(query, autoescape=True),
        ))
        .order_by(User.username)
        .limit(limit)
        .all()
    )
    return [UserWithFollowers.model_validate(row) for row in rows]


def search_users_by_name(db: Session, query: str, limit: int) -> List[UserSummary]:
    rows = (
        db.query(User.id, User.name, User.username, User.image)
        .filter(or_(
            User.name.icontains(query, autoescape=True),
            User.username.icontains(query, autoescape=True),
        ))
        .order_by(User.username)
        .limit(limit)
        .all()
    )
    return [UserSummary.model_validate(row) for row in rows]


def search_posts(db: Session, query: str, limit: int, viewer_id: Optional[str] = None) -> List[PostOut]:
    rows = (
        post_query(db, viewer_id)
        .filter(Post.content.icontains(query, autoescape=True))
        .order_by(Post.created_at.desc())
        .limit(limit)
        .all()
    )
    return to_posts(rows)


def search_hashtags(db: Session, query: str, limit: int) -> List[HashtagOut]:
    tag = normalize_tag(query)
    # "#" only marks a tag, so what remains must still meet the minimum length
    if len(tag) < 2:
        return []
    hashtags = (
        db.query(Hashtag)
        .filter(Hashtag.tag.icontains(tag, autoescape=True))
        .order_by(Hashtag.post_count.desc())
        .limit(limit)
        .all()
    )
    return [HashtagOut.model_validate(h) for h in hashtags]


def get_hashtag_posts(
    db: Session, tag: str, page: int, limit: int, viewer_id: Optional[str] = None
) -> Tuple[List[PostOut], int]:
    tag = normalize_tag(tag)
    rows = (
        post_query(db, viewer_id)
        .join(post_hashtags, post_hashtags.c.post_id == Post.id)
        .join(Hashtag, Hashtag.id == post_hashtags.c.hashtag_id)
        .filter(Hashtag.tag == tag)
        .order_by(Post.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    total = (
        db.query(func.count(post_hashtags.c.post_id))
        .join(Hashtag, Hashtag.id == post_hashtags.c.hashtag_id)
        .filter(Hashtag.tag == tag)
        .scalar()
    )
    return to_posts(rows), total
