# security.py
"""
Authentication helpers: bcrypt password hashing and HS256 bearer tokens.

Tokens carry the user's id and role; `get_current_user` turns them into the
CurrentUser that every service operation receives.
"""
import os
from typing import Optional

from fastapi import HTTPException, Request
from jose import JWTError, jwt
from passlib.context import CryptContext
from dotenv import load_dotenv

from models import UserRole
from services.context import CurrentUser

load_dotenv()
ALGORITHM = "HS256"

# Bcrypt
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def _secret_key() -> str:
     secret = os.getenv("JWT_SECRET")
     if not secret:
          raise RuntimeError("JWT_SECRET is not set; refusing to sign or verify tokens")
     return secret


def hash_password(password: str) -> str:
     return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
     return pwd_context.verify(password, hashed)


def create_access_token(user_id: int, role: UserRole) -> str:
     return jwt.encode({"id": user_id, "role": role.value}, _secret_key(), algorithm=ALGORITHM)


# Token Auth Dependency
def verify_token(request: Request) -> dict:
     auth = request.headers.get("Authorization")
     if not auth or not auth.startswith("Bearer "):
          raise HTTPException(status_code=401, detail="Missing token")
     token = auth.split(" ")[1]
     try:
          payload = jwt.decode(token, _secret_key(), algorithms=[ALGORITHM])
          return payload
     except JWTError:
          raise HTTPException(status_code=403, detail="Invalid token")


def current_user_from_token(token: dict) -> CurrentUser:
     user_id: Optional[int] = token.get("id")
     if not user_id:
          raise HTTPException(status_code=401, detail="Token has no user id")
     try:
          role = UserRole(token.get("role", UserRole.USER.value))
     except ValueError:
          raise HTTPException(status_code=403, detail="Unknown role")
     return CurrentUser(id=int(user_id), role=role)


def get_current_user(request: Request) -> CurrentUser:
     return current_user_from_token(verify_token(request))
