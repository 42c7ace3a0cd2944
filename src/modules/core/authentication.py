"""Shared-token authentication for the state endpoint.

The key-value endpoint is called by board clients, not by people, so
there is no user model behind it: a single bearer token configured via
``STATE_API_TOKEN`` identifies every legitimate client.

Security decisions
------------------
* When ``STATE_API_TOKEN`` is empty the endpoint is open, matching a
  local single-user deployment.
* When it is set, any request without a matching token gets 401.
* Tokens are compared with ``secrets.compare_digest``.
"""

import secrets

import structlog
from django.conf import settings
from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import BasePermission

logger = structlog.get_logger(__name__)


class StateClient:
    """Lightweight principal for requests carrying the shared token."""

    is_authenticated = True
    is_active = True

    def __str__(self) -> str:  # pragma: no cover
        return "state-client"


class StateTokenAuthentication(BaseAuthentication):
    """DRF authentication class that validates the shared bearer token."""

    keyword = "Bearer"

    def authenticate(self, request):
        """Return ``(StateClient, token)`` or ``None`` (no credentials)."""
        header = request.META.get("HTTP_AUTHORIZATION", "")
        if not header:
            return None

        expected = settings.STATE_API_TOKEN
        if not expected:
            return None

        token = self._extract_token(header)
        if not secrets.compare_digest(token, expected):
            logger.warning("state_token_rejected")
            raise AuthenticationFailed("Invalid state token.")
        return (StateClient(), token)

    def authenticate_header(self, request):
        """Value for the ``WWW-Authenticate`` response header on 401."""
        return f'{self.keyword} realm="state"'

    @staticmethod
    def _extract_token(header: str) -> str:
        parts = header.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            raise AuthenticationFailed("Invalid Authorization header format.")
        return parts[1]


class StateTokenRequired(BasePermission):
    """Allow everything when no token is configured, else require one."""

    def has_permission(self, request, view) -> bool:
        if not settings.STATE_API_TOKEN:
            return True
        return bool(getattr(request.user, "is_authenticated", False))
