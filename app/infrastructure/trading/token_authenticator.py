"""
Adapter: HMAC bearer-token authenticator.

Implements the Authenticator port. A token has the form
``<user_id>.<hex hmac-sha256(user_id)>`` signed with a shared secret
held by the identity service that issues it.
"""

import hashlib
import hmac

from app.domain.trading.errors import AuthenticationError
from app.domain.trading.ports import Authenticator


class HmacTokenAuthenticator(Authenticator):
    """Verifies tokens signed with a shared secret."""

    def __init__(self, secret: str) -> None:
        if not secret:
            raise ValueError("Authentication secret must not be empty")
        self._secret = secret.encode("utf-8")

    def _sign(self, user_id: str) -> str:
        return hmac.new(self._secret, user_id.encode("utf-8"), hashlib.sha256).hexdigest()

    def issue(self, user_id: str) -> str:
        """Return a token for ``user_id``."""
        return f"{user_id}.{self._sign(user_id)}"

    def authenticate(self, token: str) -> str:
        user_id, sep, signature = token.rpartition(".")
        if not sep or not user_id or not signature:
            raise AuthenticationError("Malformed bearer token")
        if not hmac.compare_digest(self._sign(user_id), signature):
            raise AuthenticationError("Invalid bearer token")
        return user_id
