"""
session_gate.py
---------------
Issues, inspects and destroys the per-client login session, and decides
whether a request for a private page may proceed or must go to the login
page. Works on any mutable mapping: Flask's ``session`` in the app, a plain
dict in tests.
"""

from dataclasses import dataclass
from typing import Optional

ACCOUNT_ID_KEY = "account_id"
IDENTIFIER_KEY = "identifier"

READ_ONLY_METHODS = frozenset({"GET", "HEAD"})


@dataclass(frozen=True)
class GateDecision:
    allowed: bool
    redirect_to: Optional[str] = None


ALLOW = GateDecision(allowed=True)


class SessionGate:
    def __init__(self, private_paths=("/home", "/history"), login_path="/login"):
        self.private_paths = frozenset(private_paths)
        self.login_path = login_path

    def issue(self, ctx, session):
        """Bind ``ctx`` to an authenticated Session."""
        ctx.clear()
        ctx[ACCOUNT_ID_KEY] = session.account_id
        ctx[IDENTIFIER_KEY] = session.identifier
        # Flask sessions only honour PERMANENT_SESSION_LIFETIME when permanent
        if hasattr(ctx, "permanent"):
            ctx.permanent = True

    def is_private(self, path, method="GET"):
        return method.upper() in READ_ONLY_METHODS and path in self.private_paths

    def guard(self, path, ctx, method="GET"):
        if not self.is_private(path, method):
            return ALLOW
        if self.is_authenticated(ctx):
            return ALLOW
        return GateDecision(allowed=False, redirect_to=self.login_path)

    @staticmethod
    def is_authenticated(ctx):
        return ctx is not None and ctx.get(ACCOUNT_ID_KEY) not in (None, "")

    @staticmethod
    def destroy(ctx):
        if ctx is not None:
            ctx.clear()

    def who_am_i(self, ctx):
        if not self.is_authenticated(ctx):
            return {"authenticated": False}
        return {
            "authenticated": True,
            "account_id": ctx.get(ACCOUNT_ID_KEY),
            "identifier": ctx.get(IDENTIFIER_KEY),
        }
