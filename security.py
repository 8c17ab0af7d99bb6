"""
Password hashing, JWT issuing and the auth dependencies used by the routers.

A token is accepted from the Authorization header or the auth cookie, and only
while its session document exists.
"""

import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import bcrypt
from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Depends, HTTPException, Request
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from pymongo.database import Database

import config
from database import get_db, utcnow

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/signin", auto_error=False)

# bcrypt only looks at the first 72 bytes and current releases refuse longer input
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    secret = password.encode("utf-8")
    if len(secret) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(secret, password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(user_id: str, now: Optional[datetime] = None) -> str:
    now = now or utcnow()
    expire = now + timedelta(seconds=config.TOKEN_EXPIRY_SECONDS)
    claims = {"sub": user_id, "exp": expire, "iat": now, "jti": str(uuid.uuid4())}
    return jwt.encode(claims, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate a JWT.

    Raises:
        ValueError: If the signature or expiry check fails.
    """
    try:
        return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except JWTError as exc:
        raise ValueError("Invalid token") from exc


def start_session(db: Database, user_id: str) -> str:
    now = utcnow()
    token = create_access_token(user_id, now)
    db["session"].insert_one({
        "user_id": user_id,
        "token": token,
        "expires_at": now + timedelta(seconds=config.TOKEN_EXPIRY_SECONDS),
        "created_at": now,
        "updated_at": now,
    })
    return token


def end_session(db: Database, token: str) -> bool:
    return db["session"].delete_one({"token": token}).deleted_count > 0


def extract_token(request: Request, bearer: Optional[str]) -> Optional[str]:
    return bearer or request.cookies.get(config.AUTH_COOKIE_NAME)


def public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": str(user["_id"]),
        "email": user["email"],
        "name": user.get("name"),
        "avatar_url": user.get("avatar_url"),
        "bio": user.get("bio"),
        "website": user.get("website"),
        "github_username": user.get("github_username"),
        "twitter_username": user.get("twitter_username"),
        "role": user.get("role", "user"),
    }


def _resolve_user(db: Database, token: Optional[str]) -> Optional[Dict[str, Any]]:
    if not token:
        return None
    try:
        payload = decode_access_token(token)
    except ValueError:
        return None
    session = db["session"].find_one({"token": token})
    if not session or session["expires_at"] <= utcnow():
        return None
    try:
        user_oid = ObjectId(str(payload.get("sub")))
    except (InvalidId, TypeError):
        return None
    return db["user"].find_one({"_id": user_oid})


def get_optional_user(
    request: Request,
    bearer: Optional[str] = Depends(oauth2_scheme),
    db: Database = Depends(get_db),
) -> Optional[Dict[str, Any]]:
    return _resolve_user(db, extract_token(request, bearer))


def get_current_user(user: Optional[Dict[str, Any]] = Depends(get_optional_user)) -> Dict[str, Any]:
    if user is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return user


def require_admin(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    if user.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user


def is_admin(user: Optional[Dict[str, Any]]) -> bool:
    return bool(user) and user.get("role") == "admin"
