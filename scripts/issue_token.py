"""Mint bearer tokens for an identity using the environment settings.

With ``REFRESH_TOKEN_STORE=redis`` the refresh token is recorded in Redis, so
the service accepts it exactly once at ``/api/auth/refresh``.

Usage:
    python -m scripts.issue_token --identity user-123
    python -m scripts.issue_token --identity user-123 --access-only
"""

import argparse
import asyncio
import json

import structlog

from bearer_auth.core.config import settings
from bearer_auth.core.token_config import init_from_settings
from bearer_auth.core.token_store import close_token_store, init_token_store
from bearer_auth.services.token_pair_service import TokenPairService
from bearer_auth.services.token_service import sign

logger = structlog.get_logger()


async def issue(identity: str, access_only: bool) -> dict:
    """Issue tokens for ``identity`` under the configured key and store."""
    init_from_settings(settings)
    if access_only:
        token, expire_at = sign(identity)
        return {"access_token": token, "access_expire_at": expire_at.isoformat()}

    if settings.auth.refresh_token_store == "memory":
        logger.warning("Memory store is local to this process, record is discarded")
    store = await init_token_store(settings.auth, settings.redis)
    try:
        pair = await TokenPairService(store).issue(identity)
    finally:
        await close_token_store()
    return pair.model_dump(mode="json")


def main() -> None:
    parser = argparse.ArgumentParser(description="Issue bearer tokens")
    parser.add_argument("--identity", required=True, help="Identity to embed")
    parser.add_argument(
        "--access-only",
        action="store_true",
        help="Issue a single access token instead of a pair",
    )
    args = parser.parse_args()
    print(json.dumps(asyncio.run(issue(args.identity, args.access_only)), indent=2))


if __name__ == "__main__":
    main()
