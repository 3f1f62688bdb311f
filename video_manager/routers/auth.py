from fastapi import APIRouter, HTTPException, status
import logging
import secrets
import uuid

from video_manager.config import get_settings
from video_manager.schemas import AuthRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/auth")
async def login(credentials: AuthRequest):
    """Check the shared login and hand out a session token.

    The token is not stored, never expires and cannot be revoked.
    """
    settings = get_settings()
    logger.info(f"Auth attempt for username: {credentials.username}")

    if not settings.auth_username or not settings.auth_password:
        logger.error("Auth credentials not configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Authentication not configured"
        )

    username_ok = secrets.compare_digest(credentials.username.encode(), settings.auth_username.encode())
    password_ok = secrets.compare_digest(credentials.password.encode(), settings.auth_password.encode())
    if not (username_ok and password_ok):
        logger.info("Auth failed - invalid credentials")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password"
        )

    logger.info("Auth successful")
    return {"success": True, "token": str(uuid.uuid4()), "username": credentials.username}
