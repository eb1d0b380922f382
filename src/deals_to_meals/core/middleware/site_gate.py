"""Shared-password gate in front of the static site.

Page requests need a cookie holding the site password; without it the
browser is redirected to the login page. API and OAuth routes and the login
page itself are never gated.
"""

from __future__ import annotations

import secrets
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import RedirectResponse

from deals_to_meals.observability.logging import get_logger


if TYPE_CHECKING:
    from collections.abc import Sequence

    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp

logger = get_logger(__name__)


def cookie_matches(candidate: str | None, password: str) -> bool:
    """Constant-time comparison of a submitted secret with the password."""
    if not candidate or not password:
        return False
    return secrets.compare_digest(candidate.encode("utf-8"), password.encode("utf-8"))


class SiteGateMiddleware(BaseHTTPMiddleware):
    """Redirects page requests without the site cookie to the login page."""

    def __init__(
        self,
        app: ASGIApp,
        *,
        password: str,
        cookie_name: str = "site_auth",
        login_path: str = "/login.html",
        open_prefixes: Sequence[str] = ("/api", "/auth"),
    ) -> None:
        super().__init__(app)
        self.password = password
        self.cookie_name = cookie_name
        self.login_path = login_path
        self.open_prefixes = tuple(open_prefixes)

    def is_open(self, path: str) -> bool:
        return path == self.login_path or path.startswith(self.open_prefixes)

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        path = request.url.path
        if self.is_open(path):
            return await call_next(request)

        if cookie_matches(request.cookies.get(self.cookie_name), self.password):
            return await call_next(request)

        logger.debug("Site gate redirect", path=path)
        return RedirectResponse(self.login_path, status_code=302)
