import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.db import get_db
from app.models.user import User
from app.schemas.user import Token, UserCreate, UserLogin, UserResponse
from app.utils.auth import (
    create_access_token,
    get_current_user,
    get_password_hash,
    verify_password,
)
from app.utils.errors import Conflict, NotFound, Unauthenticated

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
def register(user: UserCreate, db: Session = Depends(get_db)):
    """
    Register a new user and return an access token.
    """
    if db.query(User).filter(User.email == user.email).first():
        logger.error(f"Email already registered: {user.email}")
        raise Conflict("User with this email already exists")

    db_user = User(
        name=user.name,
        email=user.email,
        hashed_password=get_password_hash(user.password),
    )
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("User with this email already exists")
    db.refresh(db_user)
    logger.debug(f"Registered user: {db_user.id}")
    return {"access_token": create_access_token(db_user.id), "user": db_user}


@router.post("/login", response_model=Token)
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    """
    Exchange an email and password for an access token.
    """
    db_user = db.query(User).filter(User.email == credentials.email).first()
    if not db_user or not verify_password(credentials.password, db_user.hashed_password):
        logger.error(f"Failed login for: {credentials.email}")
        raise Unauthenticated("Invalid email or password")
    return {"access_token": create_access_token(db_user.id), "user": db_user}


@router.get("/me", response_model=UserResponse)
def read_me(
    db: Session = Depends(get_db), current_user: dict = Depends(get_current_user)
):
    """
    Return the authenticated user.
    """
    db_user = db.query(User).filter(User.id == current_user["id"]).first()
    if not db_user:
        raise NotFound("User not found")
    return db_user
