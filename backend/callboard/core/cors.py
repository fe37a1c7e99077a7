"""Origin allow-list applied to every HTTP request.

Allowed origins get the full ``Access-Control-Allow-*`` header set, including
credentials. Preflight requests are answered here with 204; a disallowed
origin still gets 204 but no CORS headers, so the browser blocks the read.
"""
import re
from typing import Dict, Iterable, List, Pattern

from starlette.datastructures import Headers, MutableHeaders
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from callboard.core.config import Settings

ALLOW_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization"


def compile_origin_pattern(pattern: str) -> Pattern[str]:
    escaped = re.escape(pattern).replace(r"\*", r"[A-Za-z0-9.-]+")
    return re.compile(f"^{escaped}$")


class OriginPolicy:
    def __init__(self, exact: Iterable[str], patterns: Iterable[str] = ()) -> None:
        self.exact = set(exact)
        self.patterns: List[Pattern[str]] = [compile_origin_pattern(p) for p in patterns]

    @classmethod
    def from_settings(cls, config: Settings) -> "OriginPolicy":
        return cls(config.cors_origins, config.cors_origin_patterns)

    def is_allowed(self, origin: str | None) -> bool:
        if not origin:
            return False
        if origin in self.exact:
            return True
        return any(pattern.match(origin) for pattern in self.patterns)


def cors_headers(origin: str) -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
        "Access-Control-Allow-Credentials": "true",
    }


class OriginPolicyMiddleware:
    def __init__(self, app: ASGIApp, policy: OriginPolicy) -> None:
        self.app = app
        self.policy = policy

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        headers = Headers(scope=scope)
        origin = headers.get("origin")
        allowed = self.policy.is_allowed(origin)

        if (
            scope["method"] == "OPTIONS"
            and origin
            and "access-control-request-method" in headers
        ):
            preflight_headers = {**cors_headers(origin), "Vary": "Origin"} if allowed else None
            response = Response(status_code=204, headers=preflight_headers)
            await response(scope, receive, send)
            return

        if not allowed:
            await self.app(scope, receive, send)
            return

        async def send_with_cors(message: Message) -> None:
            if message["type"] == "http.response.start":
                response_headers = MutableHeaders(scope=message)
                response_headers.update(cors_headers(origin))
                response_headers.add_vary_header("Origin")
            await send(message)

        await self.app(scope, receive, send_with_cors)
