"""Auth service — password hashing and bearer token verification."""

from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from starlette.concurrency import run_in_threadpool

from app.config import get_settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


async def hash_password(password: str, context: CryptContext = pwd_context) -> str:
    # bcrypt is CPU bound; keep it off the event loop
    return await run_in_threadpool(context.hash, password)


async def verify_password(plain_password: str, hashed_password: str, context: CryptContext = pwd_context) -> bool:
    return await run_in_threadpool(context.verify, plain_password, hashed_password)


def decode_access_token(token: str) -> Optional[dict]:
    settings = get_settings()
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
        return payload
    except JWTError:
        return None
