"""FastAPI dependencies for authenticated routes."""

from fastapi import Request

from bearer_auth.core.exceptions import AuthenticationError
from bearer_auth.core.token_store import get_token_store
from bearer_auth.services.token_pair_service import TokenPairService


def get_token_pair_service() -> TokenPairService:
    """Get TokenPairService bound to the configured refresh token store."""
    return TokenPairService(get_token_store())


def get_current_identity(request: Request) -> str:
    """Extract the identity from middleware-populated state."""
    state = getattr(request, "state", None)
    if not getattr(state, "authenticated", False):
        raise AuthenticationError(message="Not authenticated")
    return state.identity
