"""Authentication API endpoints."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.security import (
    ACCESS_TOKEN_COOKIE,
    ACCESS_TOKEN_EXPIRE_MINUTES,
    authenticate_user,
    bearer_scheme,
    create_access_token,
    decode_token,
    extract_token,
    get_current_user,
    revoke_token,
)
from app.models.user import User
from app.schemas.user import UserCreate, UserLogin, UserResponse, Token
from app.services.portfolio import create_user_profile

router = APIRouter(prefix="/auth", tags=["authentication"])
logger = logging.getLogger(__name__)


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def signup(user_data: UserCreate, db: Session = Depends(get_db)):
    """Create an account and its empty portfolio.

    Args:
        user_data: Signup data
        db: Database session

    Returns:
        Created user profile

    Raises:
        DuplicateEmailError: If the email is already registered
    """
    user = create_user_profile(
        db,
        email=user_data.email,
        password=user_data.password,
        display_name=user_data.display_name,
    )
    logger.info(f"New account created: {user.email}")
    return user


@router.post("/login", response_model=Token)
def login(user_data: UserLogin, response: Response, db: Session = Depends(get_db)):
    """Login and get access token.

    The token is returned in the body and also set as an http-only cookie.

    Raises:
        HTTPException: If authentication fails
    """
    user = authenticate_user(db, user_data.email, user_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(data={"sub": str(user.id)})

    response.set_cookie(
        key=ACCESS_TOKEN_COOKIE,
        value=access_token,
        httponly=True,
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        samesite="lax"
    )
    return Token(access_token=access_token, token_type="bearer")


@router.post("/logout")
def logout(
    request: Request,
    response: Response,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
):
    """Revoke the current session token and clear the cookie."""
    token = extract_token(request, credentials)
    if token:
        try:
            revoke_token(db, decode_token(token))
        except HTTPException:
            # Already invalid, nothing to revoke
            pass

    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    return {"message": "Logged out"}


@router.get("/me", response_model=UserResponse)
def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current user information."""
    return current_user
