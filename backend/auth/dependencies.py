import hmac
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from config.settings import Settings, get_settings

# auto_error=False so a missing header is a 401 from us, not a 403 from FastAPI
security = HTTPBearer(auto_error=False)


async def verify_cron_secret(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Dependency guarding every sync trigger.

    Usage in route:
        @router.get("/cron/sync", dependencies=[Depends(verify_cron_secret)])
        async def sync(...):
            ...

    Args:
        credentials: HTTP Bearer token from Authorization header
        settings: Application settings (CRON_SECRET)

    Raises:
        HTTPException: 401 if the secret is not configured, the header is
                       missing, or the token does not match
    """
    expected = settings.CRON_SECRET
    provided = credentials.credentials if credentials else ""

    if not expected or not hmac.compare_digest(provided.encode(), expected.encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
