from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt

from fastapi import Depends, HTTPException, status, Request
from sqlalchemy.orm import Session
from database import get_db
from models_orm import UserORM

import os
import bcrypt
import logging

SECRET_KEY = os.getenv("SECRET_KEY", "dev_secret_key_123")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24))

logger = logging.getLogger("stheneco")

def verify_password(plain_password, hashed_password):
    # bcrypt requires bytes for both
    if not plain_password or not hashed_password:
        return False
    pwd_bytes = plain_password.encode('utf-8')
    hashed_bytes = hashed_password.encode('utf-8')
    return bcrypt.checkpw(pwd_bytes, hashed_bytes)

def get_password_hash(password):
    # bcrypt requires bytes, returns bytes. We store as string.
    pwd_bytes = password.encode('utf-8')
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(pwd_bytes, salt)
    return hashed.decode('utf-8')

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt


async def get_current_user(request: Request, db: Session = Depends(get_db)):
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    # Get token from Authorization header or cookie
    token = None
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header.replace("Bearer ", "")
    else:
        token = request.cookies.get("access_token")

    if not token:
        logger.debug("AUTH: No token found in header or cookie")
        raise credentials_exception

    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        user_id: str = payload.get("sub")
        if user_id is None:
            logger.info("AUTH: Token missing 'sub'")
            raise credentials_exception
    except JWTError as e:
        logger.info(f"AUTH: JWT validation error: {e}")
        raise credentials_exception

    user = db.query(UserORM).filter(UserORM.id == user_id).first()
    if user is None:
        logger.info(f"AUTH: User {user_id} not found in DB")
        raise credentials_exception

    return user


class CurrentSession:
    """Role and subscription checks for the signed-in user."""

    def __init__(self, user: Optional[UserORM]):
        self.user = user

    def is_trainer(self) -> bool:
        return self.user is not None and self.user.user_role == "trainer"

    def is_athlete(self) -> bool:
        return self.user is not None and self.user.user_role == "athlete"

    def has_active_subscription(self) -> bool:
        if self.user is None:
            return False
        return self.user.subscription_tier != "free" and self.user.subscription_status == "active"


async def get_current_session(user: UserORM = Depends(get_current_user)) -> CurrentSession:
    return CurrentSession(user)


def require_trainer(user: UserORM):
    if not CurrentSession(user).is_trainer():
        raise HTTPException(status_code=403, detail="Only trainers can access this endpoint")
