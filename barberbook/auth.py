# barberbook/auth.py

"""Login, bearer tokens and the barber role gate.

Only barbers act on the barber-facing routes. A token names the user by email
and carries the role it was issued for; the role is checked again against the
stored user on every request, and a barber must have a barber profile.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlmodel import Session, select

from barberbook.config import SECRET_KEY, JWT_ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES
from barberbook.db import get_session
from barberbook.models import Barber, User
from barberbook.schemas import UserRole

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def authenticate(session: Session, email: str, password: str) -> Optional[User]:
    user = session.exec(select(User).where(User.email == email)).first()
    if user is None or not verify_password(password, user.password_hash):
        logger.info(f"Failed login for {email}")
        return None
    return user


def create_access_token(user: User, expires_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    claims = {"sub": user.email, "role": user.role, "exp": expire}
    return jwt.encode(claims, SECRET_KEY, algorithm=JWT_ALGORITHM)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    token: str = Depends(oauth2_scheme),
    session: Session = Depends(get_session),
) -> User:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError:
        raise _unauthorized("Invalid token")

    email = payload.get("sub")
    if email is None:
        raise _unauthorized("Invalid token")

    user = session.exec(select(User).where(User.email == email)).first()
    if user is None:
        raise _unauthorized("User not found")
    return user


def require_role(user: User, role: UserRole):
    if user.role != role.value:
        raise HTTPException(status_code=403, detail="Forbidden")


def get_current_barber(
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> Barber:
    require_role(user, UserRole.barber)
    barber = session.exec(select(Barber).where(Barber.user_id == user.id)).first()
    if barber is None:
        raise HTTPException(status_code=404, detail="Barber profile not found")
    return barber
