"""Error taxonomy for the judge directory.

Every error the service raises on purpose derives from ``JudgedexError`` and
carries the HTTP status it is rendered with. The message is what the client
sees; upstream details stay in the logs.
"""
from typing import Dict, Optional


class JudgedexError(Exception):
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.headers = headers or {}


class InvalidJudgeId(JudgedexError):
    status_code = 400
    message = "Invalid judge ID provided"


class InvalidQuery(JudgedexError):
    status_code = 400
    message = "Invalid query parameters"


class JudgeNotFound(JudgedexError):
    status_code = 404
    message = "The requested judge could not be found in our database."


class ServiceConfigurationError(JudgedexError):
    status_code = 500
    message = "Service configuration error"


class RateLimitExceeded(JudgedexError):
    status_code = 429
    message = "Too many requests from this IP, please try again later."


# ---------------------------------------------------------------------------
# CourtListener transport outcomes
# ---------------------------------------------------------------------------

class CourtListenerError(JudgedexError):
    status_code = 502
    message = "Upstream legal-records service failed"


class CourtListenerNotFound(CourtListenerError):
    status_code = 404
    message = "Resource not found."


class CourtListenerAuthFailed(CourtListenerError):
    # Rendered as a generic configuration error: the token is ours, not the caller's.
    status_code = 500
    message = "Service configuration error"


class CourtListenerRateLimited(CourtListenerError):
    status_code = 429
    message = "Rate limit exceeded. Please try again later."


class CourtListenerTransportError(CourtListenerError):
    status_code = 502
    message = "Upstream legal-records service failed"
