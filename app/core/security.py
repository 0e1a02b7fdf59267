# JWT verification logic
# backend/app/core/security.py

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional, Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError

from app.core.config import settings

logger = logging.getLogger(__name__)

# Scheme for extracting "Bearer <token>" from Authorization header
# auto_error=False means we handle the error manually if token is missing/malformed
token_bearer_scheme = HTTPBearer(auto_error=False)

# --- Custom Exceptions ---
class CredentialsException(HTTPException):
    def __init__(self, detail: str = "Not authorized, token failed", status_code: int = status.HTTP_401_UNAUTHORIZED):
        super().__init__(
            status_code=status_code,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )

class TokenExpiredException(CredentialsException):
    def __init__(self, detail: str = "Token has expired"):
        super().__init__(detail=detail, status_code=status.HTTP_401_UNAUTHORIZED)

class InvalidTokenException(CredentialsException):
    def __init__(self, detail: str = "Invalid token signature or format"):
        super().__init__(detail=detail, status_code=status.HTTP_401_UNAUTHORIZED)

class MissingTokenException(CredentialsException):
    def __init__(self, detail: str = "Not authorized, no token"):
        super().__init__(detail=detail, status_code=status.HTTP_401_UNAUTHORIZED)

class InsufficientPermissionsException(CredentialsException):
    def __init__(self, detail: str = "Not authorized as an admin"):
        super().__init__(detail=detail, status_code=status.HTTP_403_FORBIDDEN)


# --- Token issuing ---

def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Issues a signed token for `subject` (a user id). Tokens are normally issued
    by the user service; this is used by tooling and tests.
    """
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {"sub": subject, "exp": expire}
    return jwt.encode(
        to_encode,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


# --- Core Verification Logic ---

async def verify_token(
    auth_credentials: Optional[HTTPAuthorizationCredentials] = Depends(token_bearer_scheme),
) -> Dict[str, Any]:
    """
    Verifies the JWT from the Authorization header.

    Returns:
        The decoded JWT payload as a dictionary if valid.

    Raises:
        MissingTokenException: If no token is provided or format is wrong.
        TokenExpiredException: If the token has expired.
        InvalidTokenException: If the token signature, format or claims are invalid.
    """
    if auth_credentials is None or not auth_credentials.credentials:
        logger.warning("Authentication attempt failed: No token provided in Authorization header.")
        raise MissingTokenException()

    token = auth_credentials.credentials
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
            options={"verify_signature": True, "verify_exp": True, "verify_aud": False},
        )
        return payload

    except ExpiredSignatureError:
        logger.warning("Authentication attempt failed: Token expired.")
        raise TokenExpiredException()
    except JWTClaimsError as e:
        logger.warning(f"Authentication attempt failed: Invalid claims - {e}")
        raise InvalidTokenException(detail=f"Invalid token claims: {e}")
    except JWTError as e:
        logger.warning(f"Authentication attempt failed: Invalid token format or signature - {e}")
        raise InvalidTokenException(detail=f"Invalid token: {e}")


async def get_current_user_id(
    payload: Dict[str, Any] = Depends(verify_token)
) -> str:
    """
    FastAPI dependency that verifies the token and returns the user ID ('sub' claim).

    Raises:
        CredentialsException: If the 'sub' claim is missing or not a string.
    """
    user_id = payload.get("sub")
    if user_id is None:
        logger.error("Authentication failed: 'sub' claim (user ID) missing from token payload.")
        raise CredentialsException(detail="User identifier not found in token")
    if not isinstance(user_id, str):
        logger.error(f"Authentication failed: 'sub' claim is not a string (type: {type(user_id)}).")
        raise CredentialsException(detail="Invalid user identifier format in token")

    return user_id
