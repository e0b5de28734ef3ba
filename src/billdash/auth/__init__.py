from .actions import authenticate, SignInResult
from .deps import require_user, get_identity_provider
from .keycloak import IdentityProvider, KeycloakProvider
from .tokens import TokenSet

__all__ = [
    "authenticate", "SignInResult",
    "require_user", "get_identity_provider",
    "IdentityProvider", "KeycloakProvider", "TokenSet",
]
