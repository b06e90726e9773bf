from collections import deque
from time import monotonic

from fastapi import HTTPException, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from hillcipher.shared import Config, Logger, load_config

logger = Logger(__name__).get_logger()
config: Config = load_config()
config_rate_limit = config.network.rate_limit


class RateLimit(BaseHTTPMiddleware):
    """Rate Limit middleware for FastApi endpoints
    Based loosely on sliding window rate limiting.
    Keyed on the client IP.
    """

    def __init__(
        self,
        app,
        dispatch=None,
        timeout_period_s=config_rate_limit.timeout_period,
        max_per_second=config_rate_limit.ip_rate_limit,
        enabled=config_rate_limit.enabled,
    ):
        super().__init__(app, dispatch)

        # Params
        self.__max_per_second = max_per_second
        self.__timeout_period_s = timeout_period_s
        self.__enabled = enabled

        # Checks
        self.__bucket: dict[str, deque[float]] = {}
        self.__timeout_club: dict[str, float] = {}

        # Time
        self.__now = monotonic()
        self.__last_sweep = self.__now

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        # Skip rate limiting for OPTIONS requests (CORS preflight)
        if not self.__enabled or request.method == "OPTIONS":
            return await call_next(request)

        host = request.client.host if request.client is not None else "unknown"
        try:
            self.__now = monotonic()
            self.__sweep()
            self.__check(host)
        except HTTPException as e:
            logger.warning("Rate limited %s on %s", host, request.url.path)
            return JSONResponse(status_code=e.status_code, content={"detail": e.detail})

        return await call_next(request)

    def __check(self, key: str):
        # if key is in timeout; then reject
        # record the request timestamp
        # lazily prune records older than a second
        # after pruning, if records exceed
        # `max_per_second` then put key in timeout and reject

        self.__create_deque(key)
        self.__timeout_check(key)

        queue = self.__bucket[key]
        queue.append(self.__now)

        while self.__now - queue[0] > 1:
            queue.popleft()

        if len(queue) > self.__max_per_second:
            self.__timeout(key)
            raise HTTPException(status_code=429, detail="Too many requests.")

    @property
    def tracked_clients(self) -> int:
        return len(self.__bucket)

    def __sweep(self):
        # at most once a second, forget clients with no recent requests
        # and no active timeout
        if self.__now - self.__last_sweep < 1:
            return
        self.__last_sweep = self.__now

        for key, timeout_timestamp in list(self.__timeout_club.items()):
            if self.__now - timeout_timestamp > self.__timeout_period_s:
                del self.__timeout_club[key]

        for key, queue in list(self.__bucket.items()):
            while queue and self.__now - queue[0] > 1:
                queue.popleft()
            if not queue and key not in self.__timeout_club:
                del self.__bucket[key]

    def __create_deque(self, key: str):
        if key not in self.__bucket:
            self.__bucket[key] = deque()

    def __timeout_check(self, key: str):
        if key not in self.__timeout_club:
            return

        timeout_timestamp = self.__timeout_club[key]

        if self.__now - timeout_timestamp > self.__timeout_period_s:
            del self.__timeout_club[key]
            self.__bucket[key].clear()
        else:
            raise HTTPException(status_code=429, detail="Too many requests.")

    def __timeout(self, key: str):
        self.__timeout_club[key] = monotonic()
