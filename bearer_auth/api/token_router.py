"""Token rotation endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from bearer_auth.dependencies import get_token_pair_service
from bearer_auth.schemas.response_schema import (
    ApiResponse,
    ErrorResponse,
    success_response,
)
from bearer_auth.schemas.token_schema import (
    RefreshRequest,
    RevokeRequest,
    RevokeResponse,
    TokenPairResponse,
)
from bearer_auth.services.token_pair_service import TokenPairService

router = APIRouter(
    prefix="/api/auth",
    tags=["auth"],
    responses={401: {"model": ErrorResponse, "description": "Token rejected"}},
)

TokenPairServiceDep = Annotated[TokenPairService, Depends(get_token_pair_service)]


@router.post("/refresh", response_model=ApiResponse[TokenPairResponse])
async def refresh(
    body: RefreshRequest,
    token_pair_service: TokenPairServiceDep,
) -> dict:
    """Exchange a refresh token for a new token pair."""
    pair = await token_pair_service.rotate(body.refresh_token)
    return success_response(TokenPairResponse.from_pair(pair))


@router.post("/revoke", response_model=ApiResponse[RevokeResponse])
async def revoke(
    body: RevokeRequest,
    token_pair_service: TokenPairServiceDep,
) -> dict:
    """Revoke a refresh token."""
    revoked = await token_pair_service.revoke(body.refresh_token)
    return success_response(RevokeResponse(revoked=revoked))
