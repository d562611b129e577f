from fastapi import APIRouter, HTTPException, status

from ...core.config import settings
from ...core.logging import get_logger
from ...core.security import ADMIN_SUBJECT, create_access_token, verify_password
from .schemas import TokenRequest, TokenResponse

router = APIRouter()
logger = get_logger(__name__)


@router.post("/token", response_model=TokenResponse)
async def issue_admin_token(payload: TokenRequest) -> TokenResponse:
    if not settings.admin_password_hash:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Admin login is not configured")
    if not verify_password(payload.password, settings.admin_password_hash):
        logger.warning("admin_login_failed")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect password")
    logger.info("admin_login_succeeded")
    return TokenResponse(
        access_token=create_access_token(ADMIN_SUBJECT),
        expires_in=settings.access_token_expire_minutes * 60,
    )
