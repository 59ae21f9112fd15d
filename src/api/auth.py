"""Bearer API-key authentication for the REST API"""
import hmac
import logging
import os
from fastapi import HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_api_keys() -> list[str]:
    """
    Client API keys from API_KEYS (comma separated)

    Read on every call so keys can be rotated without a restart.
    """
    return [key.strip() for key in os.getenv("API_KEYS", "").split(",") if key.strip()]


def is_valid_api_key(candidate: str, valid_keys: list[str]) -> bool:
    """Constant-time membership check"""
    return any(hmac.compare_digest(candidate.encode(), key.encode()) for key in valid_keys)


async def verify_api_key(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """
    FastAPI dependency guarding every /api/v1 route

    Raises:
        HTTPException: 503 when no keys are configured, 401 for an unknown key
    """
    valid_keys = get_api_keys()

    if not valid_keys:
        logger.error("API_KEYS is empty - rejecting request")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="API authentication not configured"
        )

    if not is_valid_api_key(credentials.credentials, valid_keys):
        logger.warning("Rejected request with unknown API key")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key"
        )

    return credentials.credentials
