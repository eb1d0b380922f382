"""Custom middleware components."""

from deals_to_meals.core.middleware.logging import LoggingMiddleware
from deals_to_meals.core.middleware.request_id import RequestIDMiddleware
from deals_to_meals.core.middleware.site_gate import SiteGateMiddleware, cookie_matches


__all__ = [
    "LoggingMiddleware",
    "RequestIDMiddleware",
    "SiteGateMiddleware",
    "cookie_matches",
]
