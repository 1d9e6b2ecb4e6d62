import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from app.api.v1 import auth, user
from app.core.config import DATABASE_URL, FRONTEND_URL
from app.core.logging_config import setup_logging
from app.db.base import Base
from app.db.session import engine, ensure_database, check_database
from app.routers import post
from app.routers import comment
from app.routers import like
from app.routers import follow
from app.routers import message
from app.routers import notifications
from app.routers import discover
from app.routers import search

logger = logging.getLogger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    ensure_database(DATABASE_URL)
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")
    yield
    engine.dispose()


app = FastAPI(title="Social API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.get("/health", tags=["Health"])
def health():
    if not check_database():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "degraded", "database": "unavailable"},
        )
    return {"status": "ok", "database": "ok"}


app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(user.router, prefix="/api/users", tags=["Users"])
app.include_router(post.router, prefix="/api/posts", tags=["Posts"])
app.include_router(comment.router, prefix="/api/comments", tags=["Comments"])
app.include_router(like.router, prefix="/api/likes", tags=["Likes"])
app.include_router(follow.router, prefix="/api/follows", tags=["Follows"])
app.include_router(message.router, prefix="/api/messages", tags=["Messages"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["Notifications"])
app.include_router(discover.router, prefix="/api/discover", tags=["Discover"])
app.include_router(search.router, prefix="/api/search", tags=["Search"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
