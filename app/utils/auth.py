from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from datetime import datetime, timedelta, timezone
from typing import Optional
from passlib.context import CryptContext
from sqlalchemy.orm import Session
from app.config import get_settings
from app.db import get_db
from app.models.user import User
from app.utils.errors import Unauthenticated

settings = get_settings()

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# HTTP Bearer scheme for JWT token
bearer_scheme = HTTPBearer(
    scheme_name="JWT",
    auto_error=False,
    description="Enter 'Bearer <your_jwt_token>' in the Value field. Obtain the token via /auth/login or /auth/register.",
)


def verify_password(plain_password, hashed_password):
    """Verify a plain password against a hashed password."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    """Hash a password for storage."""
    return pwd_context.hash(password)


def create_access_token(user_id: int, expires_delta: timedelta = None):
    """Create a JWT access token for a user id with an expiration time."""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {"sub": str(user_id), "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def authenticate(token: str, db: Session) -> User:
    """Resolve a bearer token to its user, or raise `Unauthenticated`."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        subject = payload.get("sub")
        if subject is None:
            raise Unauthenticated("Could not validate credentials")
        user_id = int(subject)
    except (JWTError, ValueError) as e:
        raise Unauthenticated(f"Could not validate credentials: {str(e)}")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise Unauthenticated("Could not validate credentials")
    return user


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
):
    """Verify JWT token from Bearer header and return the current user."""
    if credentials is None:
        raise Unauthenticated("Not authenticated")
    user = authenticate(credentials.credentials, db)
    return {"id": user.id, "name": user.name, "email": user.email}
