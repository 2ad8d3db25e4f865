from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
from storefront.database.connection import get_db
from storefront.models.user import User
from storefront.schemas.user import (
    ForgotPasswordRequest,
    MessageResponse,
    ResetPasswordRequest,
    UserCreate,
    UserResponse,
)
from storefront.core.security import (
    verify_password,
    get_password_hash,
    create_access_token,
    decode_refresh_token,
    create_refresh_token
)
from storefront.services.cart_service import merge_guest_cart_into_user
from storefront.services.email_service import EmailSender, get_email_sender
from storefront.services.password_service import request_password_reset, reset_password

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=UserResponse)
def register_user(data: UserCreate, db: Session = Depends(get_db)):
    existing = db.query(User).filter(User.username == data.username).first()
    if existing:
        raise HTTPException(status_code=400, detail="Username already taken")
    if data.email and db.query(User).filter(User.email == data.email).first():
        raise HTTPException(status_code=400, detail="Email already registered")

    user = User(
        username=data.username,
        email=data.email,
        hashed_password=get_password_hash(data.password),
        role=data.role,
    )

    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@router.post("/login")
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    guest_id: Optional[str] = Form(default=None),
    db: Session = Depends(get_db),
):
    user = db.query(User).filter(User.username == form_data.username).first()

    if not user or not verify_password(form_data.password, user.hashed_password):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    # carry over whatever the visitor put in their cart before logging in
    merge_guest_cart_into_user(db, guest_id, user.id)

    access_token = create_access_token({"sub": user.username, "role": user.role})
    refresh_token = create_refresh_token({"sub": user.username, "role": user.role})

    return {
        "access_token": access_token,
        "refresh_token": refresh_token,
        "token_type": "bearer"
    }

@router.post("/refresh")
def refresh_token(refresh_token: str):
    payload = decode_refresh_token(refresh_token)

    if not payload or not payload.username:
        raise HTTPException(status_code=401, detail="Invalid or expired refresh token")

    new_access = create_access_token(
        {"sub": payload.username, "role": payload.role}
    )

    return {
        "access_token": new_access,
        "token_type": "bearer"
    }


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(
    data: ForgotPasswordRequest,
    db: Session = Depends(get_db),
    sender: EmailSender = Depends(get_email_sender),
):
    request_password_reset(db, data.email, sender)
    return MessageResponse(message="Password reset link sent to your email")


@router.put("/reset-password/{token}", response_model=MessageResponse)
def reset_password_with_token(token: str, data: ResetPasswordRequest, db: Session = Depends(get_db)):
    reset_password(db, token, data.password)
    return MessageResponse(
        message="Password reset successfully. You can now login with your new password."
    )
