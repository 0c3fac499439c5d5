import time

from fastapi import Request, Response
from limits import parse
from limits.aio.strategies import MovingWindowRateLimiter
from limits.storage import storage_from_string

from judgedex.config import settings
from judgedex.core.exceptions import RateLimitExceeded


def get_remote_address(request: Request) -> str:
    return request.client.host if request.client else "127.0.0.1"


class RateLimiter:
    """Sliding-window limit as a FastAPI dependency, keyed by client IP.

    Usage:
        @router.get("/{judge_id}", dependencies=[Depends(judge_profile_limiter)])
    """

    def __init__(self, limit: str, storage_uri: str = "memory://", scope: str = "default", key_func=get_remote_address):
        if not storage_uri.startswith("async+"):
            storage_uri = f"async+{storage_uri}"
        self.limit = parse(limit)
        self.storage = storage_from_string(storage_uri)
        self.strategy = MovingWindowRateLimiter(self.storage)
        self.scope = scope
        self.key_func = key_func

    async def reset(self) -> None:
        await self.storage.reset()

    async def __call__(self, request: Request, response: Response) -> None:
        key = self.key_func(request)
        allowed = await self.strategy.hit(self.limit, self.scope, key)
        stats = await self.strategy.get_window_stats(self.limit, self.scope, key)

        headers = {
            "X-RateLimit-Limit": str(self.limit.amount),
            "X-RateLimit-Remaining": str(max(stats.remaining, 0)),
            "X-RateLimit-Reset": str(int(stats.reset_time)),
        }
        if not allowed:
            headers["Retry-After"] = str(max(int(stats.reset_time - time.time()), 1))
            raise RateLimitExceeded(headers=headers)
        response.headers.update(headers)


judge_profile_limiter = RateLimiter(
    settings.JUDGE_PROFILE_RATE_LIMIT,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    scope="judge-profile",
)
