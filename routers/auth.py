# routers/auth.py
"""
Registration and login.

Registration creates a User (or a Landlord when requested); Admin accounts
are never self-registered.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from database import get_session
from models import User, UserRole
from security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


# Auth Schemas
class RegisterRequest(BaseModel):
     firstName: str = Field(..., min_length=1, max_length=100)
     lastName: str = Field(..., min_length=1, max_length=100)
     email: str = Field(..., min_length=3, max_length=255)
     password: str = Field(..., min_length=6)
     role: UserRole = UserRole.USER


class LoginRequest(BaseModel):
     email: str
     password: str


@router.post("/register", status_code=status.HTTP_201_CREATED, summary="Register a new account")
def register_user(body: RegisterRequest, db: Session = Depends(get_session)):
     if body.role == UserRole.ADMIN:
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin accounts cannot self-register")

     existing = db.query(User).filter(User.email == body.email).first()
     if existing:
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")

     user = User(
          first_name=body.firstName,
          last_name=body.lastName,
          email=body.email,
          password=hash_password(body.password),
          role=body.role,
     )
     db.add(user)
     db.flush()
     logger.info("Registered user %s as %s", user.id, user.role.value)
     return {"success": True, "id": user.id}


@router.post("/login", summary="Exchange credentials for a bearer token")
def login_user(body: LoginRequest, db: Session = Depends(get_session)):
     user = db.query(User).filter(User.email == body.email).first()
     if not user:
          raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

     if not verify_password(body.password, user.password):
          raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect password")

     token = create_access_token(user.id, user.role)
     return {"token": token, "user": {
          "id": user.id,
          "email": user.email,
          "first_name": user.first_name,
          "last_name": user.last_name,
          "role": user.role.value
     }}
