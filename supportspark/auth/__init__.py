"""Authentication helpers: password hashing, session lookup, rate limiting.

Public re-exports so callers can write::

    from supportspark.auth import hash_password, verify_password
    from supportspark.auth import current_user, login_user
"""

from supportspark.auth.emails import normalize_email
from supportspark.auth.passwords import hash_password, verify_password
from supportspark.auth.rate_limit import RateLimiter, auth_rate_limit
from supportspark.auth.session import current_user, login_user, logout_user

__all__ = [
    "normalize_email",
    "hash_password",
    "verify_password",
    "RateLimiter",
    "auth_rate_limit",
    "current_user",
    "login_user",
    "logout_user",
]
