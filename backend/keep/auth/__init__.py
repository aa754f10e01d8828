"""Web authentication: Starlette backend, per-request provider client, route policy."""

from keep.auth.backend import ProviderSessionBackend
from keep.auth.middleware import AuthClientMiddleware
from keep.auth.models import AuthenticatedUser
from keep.auth.policy import protected_html, public_route, validate_route_auth_policy

__all__ = [
    "AuthClientMiddleware",
    "AuthenticatedUser",
    "ProviderSessionBackend",
    "protected_html",
    "public_route",
    "validate_route_auth_policy",
]
