"""
Admin gate for mutating endpoints.

The site has a single admin credential. The admin cookie carries the SHA-256
digest of the admin password; a request is authorized when its cookie
matches the configured digest. Handlers receive the check as a plain
predicate so tests can swap it out.
"""
import hashlib
import hmac
from typing import Callable

from fastapi import Request

Authorizer = Callable[[Request], bool]


def hash_password(password: str) -> str:
    """
    Derive the admin token from a password.

    Args:
        password: Plain-text password

    Returns:
        Lowercase SHA-256 hex digest
    """
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def password_matches(password: str, expected_hash: str) -> bool:
    """Check a plain-text password against the configured digest."""
    if not expected_hash:
        return False
    return hmac.compare_digest(hash_password(password).encode("utf-8"), expected_hash.encode("utf-8"))


class AdminCookieAuthorizer:
    """Authorizes requests whose admin cookie equals the admin token."""

    def __init__(self, admin_token: str, cookie_name: str = "admin"):
        """
        Initialize the authorizer.

        Args:
            admin_token: Expected cookie value (empty disables admin access)
            cookie_name: Name of the admin cookie (default: "admin")
        """
        self.admin_token = admin_token
        self.cookie_name = cookie_name

    def __call__(self, request: Request) -> bool:
        if not self.admin_token:
            return False
        cookie = request.cookies.get(self.cookie_name)
        if not cookie:
            return False
        return hmac.compare_digest(cookie.encode("utf-8"), self.admin_token.encode("utf-8"))


def allow_all(_request: Request) -> bool:
    """Authorize every request (local development only)."""
    return True


def deny_all(_request: Request) -> bool:
    """Reject every request."""
    return False
