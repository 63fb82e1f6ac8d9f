from fastapi import Request, status

from config import ApplicationConfig
from libs.result import Error
from src.api.error import ClientError
from src.app.services.rate_limiter import IRateLimiter, rate_limit_key

TOO_MANY_REQUESTS = Error("TOO_MANY_REQUESTS", "Too many requests. Please try again later.")

LIMITS = {
    "auth": ApplicationConfig.AUTH_RATE_LIMIT,
    "verification": ApplicationConfig.VERIFICATION_RATE_LIMIT,
    "password": ApplicationConfig.PASSWORD_RATE_LIMIT,
}


def client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def enforce_rate_limit(
    limiter: IRateLimiter, request: Request, operation: str, subject: str = ""
) -> None:
    """
    Count one attempt of a throttled operation.

    Raises:
        ClientError: 429 once the per-window limit is exceeded
    """
    if not ApplicationConfig.RATE_LIMIT_ENABLED:
        return

    key = rate_limit_key(operation, client_ip(request), subject)
    allowed = await limiter.hit(key, LIMITS[operation], ApplicationConfig.RATE_LIMIT_WINDOW_SECONDS)
    if not allowed:
        raise ClientError(TOO_MANY_REQUESTS, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
