"""
auth.py
-------
Handles user authentication for the portal. Checks a username/password pair
against the account store under the configured policy and produces either a
Session to issue or the reason the attempt was rejected.
"""

import hmac
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from login_portal.database import Account, StoreUnavailable

logger = logging.getLogger(__name__)


class RejectReason(Enum):
    """Why a login was refused, with the code and status clients see."""
    MISSING_IDENTIFIER = ("missing_fields", 400, "username required")
    MISSING_SECRET = ("missing_fields", 400, "password required")
    ACCOUNT_NOT_FOUND = ("account_not_found", 401, "unknown user")
    INVALID_CREDENTIALS = ("invalid_credentials", 401, "wrong password")
    STORE_UNAVAILABLE = ("internal_error", 500, "account store unavailable")

    def __init__(self, code, status, detail):
        self.code = code
        self.status = status
        self.detail = detail


@dataclass(frozen=True)
class AuthPolicy:
    """Process-wide login policy, fixed at startup."""
    identifier_only_allowed: bool = False


@dataclass(frozen=True)
class Session:
    account_id: int
    identifier: str


@dataclass(frozen=True)
class AuthResult:
    """Result of authentication attempt"""
    session: Optional[Session] = None
    reason: Optional[RejectReason] = None

    @property
    def ok(self) -> bool:
        return self.session is not None


def policy_from_config(config) -> AuthPolicy:
    value = config.get("ALLOW_USERNAME_ONLY", False)
    if isinstance(value, str):
        value = value.lower() == "true"
    return AuthPolicy(identifier_only_allowed=bool(value))


def secrets_match(submitted: str, stored: str) -> bool:
    """Exact, case-sensitive comparison that does not short-circuit on content."""
    return hmac.compare_digest(
        submitted.encode("utf-8", "surrogatepass"),
        (stored or "").encode("utf-8", "surrogatepass"),
    )


def _reject(reason: RejectReason, identifier: str) -> AuthResult:
    logger.warning("Login rejected (%s) for user %r", reason.name, identifier)
    return AuthResult(reason=reason)


def authenticate(
    identifier: str,
    secret: str,
    policy: AuthPolicy,
    lookup: Callable[[str], Optional[Account]],
) -> AuthResult:
    """
    Authenticate a username/password pair.

    Checks run in a fixed order and stop at the first failure, so missing
    fields are reported before the store is touched and an unknown user is
    reported separately from a wrong password.

    Args:
        identifier: Submitted username, already stripped
        secret: Submitted password, exactly as sent ('' when omitted)
        policy: Login policy for this process
        lookup: Returns the Account for a username, or None

    Returns:
        AuthResult carrying a Session on success, a RejectReason otherwise
    """
    if not identifier:
        return _reject(RejectReason.MISSING_IDENTIFIER, identifier)

    if not policy.identifier_only_allowed and not secret:
        return _reject(RejectReason.MISSING_SECRET, identifier)

    try:
        account = lookup(identifier)
    except StoreUnavailable as e:
        logger.error("Account lookup failed for user %r: %s", identifier, e)
        return AuthResult(reason=RejectReason.STORE_UNAVAILABLE)

    if account is None:
        return _reject(RejectReason.ACCOUNT_NOT_FOUND, identifier)

    # Username-only mode: an omitted password skips the comparison entirely
    if not (policy.identifier_only_allowed and not secret):
        if not secrets_match(secret, account.password):
            return _reject(RejectReason.INVALID_CREDENTIALS, identifier)

    logger.info("User %r authenticated", account.username)
    return AuthResult(session=Session(account_id=account.id, identifier=account.username))
