import logging
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from app.db.models.user import User
from app.schemas.user import UserCreate, UserOut
from app.schemas.token import Token
from app.core.security import hash_password, verify_password, create_access_token
from app.db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(user_in: UserCreate, db: Session = Depends(get_db)):
    name = user_in.name.strip()
    username = user_in.username.strip()
    if not name or not username or not user_in.password:
        raise HTTPException(status_code=400, detail="Name, username and password are required")

    user = db.query(User).filter(
        or_(User.email == user_in.email, User.username == username)
    ).first()
    if user:
        detail = "Email already registered" if user.email == user_in.email else "Username already taken"
        raise HTTPException(status_code=400, detail=detail)

    new_user = User(
        name=name,
        username=username,
        email=user_in.email,
        password=hash_password(user_in.password),
    )
    try:
        db.add(new_user)
        db.commit()
        db.refresh(new_user)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Email or username already registered")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error registering user: {str(e)}")
        raise HTTPException(500, "Failed to register user")

    logger.info("Registered user %s", new_user.id)
    return new_user


@router.post("/login", response_model=Token)
def login(db: Session = Depends(get_db), form_data: OAuth2PasswordRequestForm = Depends()):
    user = db.query(User).filter(User.email == form_data.username).first()
    if not user or not verify_password(form_data.password, user.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token({"sub": user.id})
    return Token(access_token=access_token, token_type="bearer", user_id=user.id)
