# 📄 File: app/api/middleware/rate_limiting.py
# 🧭 Purpose (Layman Explanation):
# Stops a single user from hammering the expensive clean-up and delete buttons over and over,
# like a bouncer who only lets each person in a few times an hour.
# 🧪 Purpose (Technical Summary):
# slowapi Limiter keyed by authenticated user id (falling back to client IP), plus the 429
# handler that renders limit violations in the application's error envelope.
# 🔗 Dependencies:
# slowapi, FastAPI, settings, logging context
# 🔄 Connected Modules / Calls From:
# app.main (limiter registration), community post and storage endpoints

from datetime import datetime, timezone

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded

from app.shared.config.settings import get_settings
from app.shared.utils.logging import get_logger, user_id_var

logger = get_logger(__name__)


def _get_client_ip(request: Request) -> str:
    """Client IP, honouring proxy headers."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    if request.client:
        return request.client.host

    return "unknown"


def rate_limit_key(request: Request) -> str:
    """Authenticated user id when known, else client IP."""
    user_id = user_id_var.get()
    if user_id:
        return f"user:{user_id}"
    return f"ip:{_get_client_ip(request)}"


limiter = Limiter(
    key_func=rate_limit_key,
    enabled=get_settings().RATE_LIMIT_ENABLED,
)


def orphan_sweep_limit() -> str:
    return get_settings().ORPHAN_SWEEP_RATE_LIMIT


def post_delete_limit() -> str:
    return get_settings().POST_DELETE_RATE_LIMIT


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Render a slowapi limit violation as a 429 error envelope."""
    logger.warning(
        f"Rate limit exceeded on {request.url.path}",
        extra={'path': request.url.path, 'limit': str(exc.detail), 'key': rate_limit_key(request)}
    )
    return JSONResponse(
        status_code=429,
        content={
            "error": {
                "code": "RATE_LIMIT_EXCEEDED",
                "message": f"Rate limit exceeded: {exc.detail}",
                "details": {"path": request.url.path},
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        },
    )
