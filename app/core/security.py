"""Security utilities for authentication and authorization."""
import uuid
from datetime import datetime, timedelta
from typing import Optional
import pytz
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.core.config import get_settings
from app.core.database import get_db, utc_now
from app.models.token import RevokedToken
from app.models.user import User
from app.schemas.user import TokenData

# Password hashing context
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

# JWT settings
_settings = get_settings()
SECRET_KEY = _settings.jwt_secret_key
ALGORITHM = _settings.algorithm
ACCESS_TOKEN_EXPIRE_MINUTES = _settings.access_token_expire_minutes

# Name of the cookie carrying the session token for browser clients
ACCESS_TOKEN_COOKIE = "access_token"

# HTTP Bearer for token authentication; cookie sessions are accepted as well
bearer_scheme = HTTPBearer(auto_error=False)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password.

    Args:
        password: Plain text password

    Returns:
        Hashed password
    """
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token.

    Args:
        data: Data to encode in the token
        expires_delta: Optional expiration time delta

    Returns:
        Encoded JWT token
    """
    to_encode = data.copy()
    if expires_delta:
        expire = utc_now() + expires_delta
    else:
        expire = utc_now() + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire, "jti": uuid.uuid4().hex})
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt


def _credentials_exception(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_token(token: str) -> TokenData:
    """Decode and verify a JWT token.

    Args:
        token: JWT token string

    Returns:
        TokenData with user id and token id

    Raises:
        HTTPException: If token is invalid
    """
    credentials_exception = _credentials_exception()
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        subject = payload.get("sub")
        if subject is None:
            raise credentials_exception
        exp = payload.get("exp")
        return TokenData(
            user_id=int(subject),
            jti=payload.get("jti"),
            expires_at=datetime.fromtimestamp(exp, tz=pytz.utc) if exp else None,
        )
    except (JWTError, ValueError):
        raise credentials_exception


def extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    """Return the bearer token, falling back to the session cookie."""
    if credentials is not None:
        return credentials.credentials
    return request.cookies.get(ACCESS_TOKEN_COOKIE)


def is_token_revoked(db: Session, jti: Optional[str]) -> bool:
    if not jti:
        return False
    return db.query(RevokedToken).filter(RevokedToken.jti == jti).first() is not None


def revoke_token(db: Session, token_data: TokenData) -> None:
    """Record a token id as logged out.

    Args:
        db: Database session
        token_data: Decoded token
    """
    if not token_data.jti or is_token_revoked(db, token_data.jti):
        return
    db.add(RevokedToken(jti=token_data.jti, expires_at=token_data.expires_at))
    db.commit()


def _user_from_token(db: Session, token: str) -> User:
    token_data = decode_token(token)
    if is_token_revoked(db, token_data.jti):
        raise _credentials_exception("Session has been logged out")

    user = db.query(User).filter(User.id == token_data.user_id).first()
    if user is None:
        raise _credentials_exception("User not found")

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user"
        )

    return user


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Get current authenticated user.

    Args:
        request: HTTP request (for the session cookie)
        credentials: HTTP Authorization credentials
        db: Database session

    Returns:
        Current User object

    Raises:
        HTTPException: If authentication fails
    """
    token = extract_token(request, credentials)
    if not token:
        raise _credentials_exception("Not authenticated")
    return _user_from_token(db, token)


def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> Optional[User]:
    """Get the authenticated user if a valid session is present, else None."""
    token = extract_token(request, credentials)
    if not token:
        return None
    try:
        return _user_from_token(db, token)
    except HTTPException:
        return None


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Authenticate a user.

    Args:
        db: Database session
        email: Login email
        password: Plain text password

    Returns:
        User object if authentication successful, None otherwise
    """
    user = db.query(User).filter(User.email == email).first()
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user
