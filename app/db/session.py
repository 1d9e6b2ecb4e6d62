import logging
import psycopg2
from sqlalchemy import create_engine, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from app.core.config import DATABASE_URL

logger = logging.getLogger(__name__)


def ensure_database(url: str = DATABASE_URL) -> None:
    """Create the PostgreSQL database named in ``url`` if it does not exist yet."""
    db_url = make_url(url)
    if not db_url.drivername.startswith("postgresql"):
        return

    try:
        conn = psycopg2.connect(
            dbname="postgres",
            user=db_url.username,
            password=db_url.password,
            host=db_url.host,
            port=db_url.port or 5432,
        )
        conn.autocommit = True
        cur = conn.cursor()
        cur.execute(f'CREATE DATABASE "{db_url.database}"')
        cur.close()
        conn.close()
        logger.info("Created database %s", db_url.database)
    except psycopg2.errors.DuplicateDatabase:
        pass
    except psycopg2.Error as e:
        logger.warning(f"Could not ensure database exists: {e}")


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        # In-memory SQLite must share a single connection across sessions
        if url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options
    return {"pool_size": 10, "max_overflow": 10, "pool_pre_ping": True}


# Setup SQLAlchemy engine
engine = create_engine(DATABASE_URL, **_engine_options(DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_database() -> bool:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        return False
