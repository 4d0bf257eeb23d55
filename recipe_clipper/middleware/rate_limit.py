"""Rate limiting using slowapi."""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from recipe_clipper.config import settings
from recipe_clipper.core.request_id import get_request_id

SCRAPE_RATE_LIMIT = f"{settings.rate_limit_per_hour}/hour"

# Initialize limiter (per client address, in-memory)
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri="memory://",
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Render rate limit errors in the API's error shape."""
    return JSONResponse(
        status_code=429,
        content={
            "statusMessage": f"Too many requests: {exc.detail}",
            "error": "RateLimitExceeded",
            "request_id": get_request_id() or None,
        },
    )
