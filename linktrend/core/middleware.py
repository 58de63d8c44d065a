import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse
from collections import defaultdict

class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, limit_per_minute: int = 60, login_limit_per_minute: int = 30, login_path: str = "/api/auth/login"):
        super().__init__(app)
        self.limit = limit_per_minute
        self.login_limit = login_limit_per_minute
        self.login_path = login_path
        # In-memory, per process: IP -> request timestamps in the last minute
        self.requests = defaultdict(list)

    async def dispatch(self, request: Request, call_next):
        client_ip = request.client.host if request.client else "unknown"
        now = time.time()

        self.requests[client_ip] = [t for t in self.requests[client_ip] if now - t < 60]

        limit = self.limit
        if request.url.path == self.login_path and request.method == "POST":
            limit = self.login_limit

        if len(self.requests[client_ip]) >= limit:
            return JSONResponse(
                status_code=429,
                content={"detail": "Too many requests. Please try again later."}
            )

        self.requests[client_ip].append(now)

        response = await call_next(request)
        return response
