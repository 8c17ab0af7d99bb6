from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.security.utils import get_authorization_scheme_param
from pydantic import BaseModel, EmailStr, Field, field_validator
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

import config
from database import create_document, get_db
from logging_config import get_logger
from schemas import User as UserSchema
from security import (
    MAX_PASSWORD_BYTES,
    end_session,
    get_current_user,
    hash_password,
    public_user,
    start_session,
    verify_password,
)

logger = get_logger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    name: Optional[str] = Field(None, max_length=100)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class SignInRequest(BaseModel):
    email: EmailStr
    password: str


def _issue(response: Response, db: Database, user) -> dict:
    token = start_session(db, str(user["_id"]))
    response.set_cookie(
        config.AUTH_COOKIE_NAME,
        token,
        max_age=config.TOKEN_EXPIRY_SECONDS,
        httponly=True,
        samesite="lax",
        secure=not config.is_development(),
    )
    return {"user": public_user(user), "token": token}


@router.post("/signup", status_code=201)
def sign_up(payload: SignUpRequest, response: Response, db: Database = Depends(get_db)):
    email = payload.email.lower()
    if db["user"].find_one({"email": email}):
        raise HTTPException(status_code=409, detail="An account with this email already exists")

    user = UserSchema(email=email, password_hash=hash_password(payload.password), name=payload.name)
    try:
        doc = create_document(db, "user", user)
    except DuplicateKeyError:
        raise HTTPException(status_code=409, detail="An account with this email already exists")
    logger.info("user_signed_up", user_id=str(doc["_id"]))
    return _issue(response, db, doc)


@router.post("/signin")
def sign_in(payload: SignInRequest, response: Response, db: Database = Depends(get_db)):
    user = db["user"].find_one({"email": payload.email.lower()})
    if not user or not verify_password(payload.password, user.get("password_hash", "")):
        raise HTTPException(status_code=401, detail="Invalid email or password")
    logger.info("user_signed_in", user_id=str(user["_id"]))
    return _issue(response, db, user)


@router.post("/signout")
def sign_out(request: Request, response: Response, db: Database = Depends(get_db)):
    scheme, bearer = get_authorization_scheme_param(request.headers.get("Authorization"))
    token = bearer if scheme.lower() == "bearer" else request.cookies.get(config.AUTH_COOKIE_NAME)
    if token:
        end_session(db, token)
    response.delete_cookie(config.AUTH_COOKIE_NAME)
    return {"success": True}


@router.get("/me")
def me(user=Depends(get_current_user)):
    return {"user": public_user(user)}
