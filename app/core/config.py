import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    return (
        f"postgresql://{os.getenv('DB_USER')}:{os.getenv('DB_PASS')}"
        f"@{os.getenv('DB_HOST', 'localhost')}:{os.getenv('DB_PORT', '5432')}/{os.getenv('DB_NAME')}"
    )


DATABASE_URL = _database_url()

SECRET_KEY = os.getenv("SECRET_KEY", "change-this-secret-key")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_DAYS = int(os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", "7"))

FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Fixed page sizes per listing
FEED_PAGE_SIZE = 50
USER_POSTS_PAGE_SIZE = 50
COMMENTS_PAGE_SIZE = 10
FOLLOWS_PAGE_SIZE = 50
CONVERSATIONS_PAGE_SIZE = 20
CHAT_PAGE_SIZE = 30
NOTIFICATIONS_PAGE_SIZE = 20
SEARCH_LIMIT = 20
HASHTAG_POSTS_PAGE_SIZE = 20
EXPLORE_PAGE_SIZE = 20

# Default top-N limits, overridable per request up to MAX_TOP_LIMIT
TRENDING_HASHTAGS_LIMIT = 10
TRENDING_POSTS_LIMIT = 20
SUGGESTED_USERS_LIMIT = 10
MAX_TOP_LIMIT = 100
