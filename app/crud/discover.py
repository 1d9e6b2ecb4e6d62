from typing import List, Tuple
from sqlalchemy import func, select
from sqlalchemy.orm import Session
from app.crud.post import comment_count_column, like_count_column, post_query, to_posts
from app.crud.search import follower_count_column
from app.db.models.follow import Block, Follow
from app.db.models.hashtag import Hashtag
from app.db.models.post import Post
from app.db.models.user import User
from app.schemas.hashtag import HashtagOut
from app.schemas.post import PostOut, TrendingPostOut
from app.schemas.user import UserWithFollowers


def get_trending_hashtags(db: Session, limit: int) -> List[HashtagOut]:
    hashtags = (
        db.query(Hashtag)
        .order_by(Hashtag.post_count.desc(), Hashtag.tag)
        .limit(limit)
        .all()
    )
    return [HashtagOut.model_validate(h) for h in hashtags]


def get_trending_posts(db: Session, limit: int) -> List[TrendingPostOut]:
    """Rank posts by likes + 2 x comments, computed on every call."""
    score = (like_count_column() + comment_count_column() * 2).label("score")
    rows = (
        post_query(db, None, score)
        .order_by(score.desc(), Post.created_at.desc())
        .limit(limit)
        .all()
    )
    return [TrendingPostOut.model_validate(row) for row in rows]


def get_suggested_users(db: Session, user_id: str, limit: int) -> List[UserWithFollowers]:
    followed = select(Follow.following_id).where(Follow.follower_id == user_id)
    blocked = select(Block.blocked_id).where(Block.blocker_id == user_id)
    follower_count = follower_count_column().label("follower_count")
    rows = (
        db.query(
            User.id,
            User.name,
            User.username,
            User.image,
            User.bio,
            follower_count,
        )
        .filter(
            User.id != user_id,
            ~User.id.in_(followed),
            ~User.id.in_(blocked),
        )
        .order_by(follower_count.desc(), User.created_at.desc())
        .limit(limit)
        .all()
    )
    return [UserWithFollowers.model_validate(row) for row in rows]


def get_explore(db: Session, user_id: str, page: int, limit: int) -> Tuple[List[PostOut], int]:
    """Posts from everyone the viewer does not follow, excluding the viewer's own."""
    followed = select(Follow.following_id).where(Follow.follower_id == user_id)
    condition = (Post.user_id != user_id) & ~Post.user_id.in_(followed)
    rows = (
        post_query(db, user_id)
        .filter(condition)
        .order_by(Post.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    total = db.query(func.count(Post.id)).filter(condition).scalar()
    return to_posts(rows), total
