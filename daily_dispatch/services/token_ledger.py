"""
Token revocation bookkeeping on top of the cache service.

Checks fail open: when the cache cannot answer, a token is treated as valid.
"""

from datetime import datetime, timezone

import structlog

from .cache_service import CacheService

logger = structlog.get_logger(__name__)

BLACKLIST_PREFIX = "token:blacklist:"
SIGN_UPDATE_PREFIX = "user:signUpdate:"
REVOKED_SENTINEL = "revoked"
SIGN_UPDATE_TTL_SECONDS = 24 * 60 * 60


class TokenRevocationLedger:
    """
    Revoked-token checks backed by the cache.

    Two mechanisms are kept side by side: per-token blacklist entries that expire
    with the token, and a per-user cutoff that invalidates every token issued
    before it.
    """

    def __init__(self, cache: CacheService):
        self.cache = cache

    async def blacklist(self, token_id: str, ttl_seconds: int = 3600) -> bool:
        """
        Revoke a single token.

        Args:
            token_id: Token identifier (jti)
            ttl_seconds: Should match the token's remaining lifetime

        Returns:
            True if the revocation was recorded, False if the cache was unavailable
        """
        result = await self.cache.set(f"{BLACKLIST_PREFIX}{token_id}", ttl_seconds, REVOKED_SENTINEL)
        if not result.success:
            logger.warning("token_blacklist_unavailable", token_id=token_id, error=result.error)
            return False
        logger.info("token_blacklisted", token_id=token_id, ttl_seconds=ttl_seconds)
        return True

    async def is_blacklisted(self, token_id: str) -> bool:
        """True only when the cache confirms the token is revoked."""
        result = await self.cache.get(f"{BLACKLIST_PREFIX}{token_id}")
        if not result.success:
            return False
        return result.value is not None

    async def invalidate_all_tokens_for_user(self, user_id: str, since_epoch_ms: int) -> bool:
        """
        Invalidate every token a user was issued before a cutoff.

        Args:
            user_id: User whose tokens are invalidated
            since_epoch_ms: Cutoff instant in epoch milliseconds

        Returns:
            True if recorded; the record itself expires after 24 hours
        """
        result = await self.cache.set(
            f"{SIGN_UPDATE_PREFIX}{user_id}",
            SIGN_UPDATE_TTL_SECONDS,
            str(int(since_epoch_ms))
        )
        if not result.success:
            logger.warning("token_invalidation_unavailable", user_id=user_id, error=result.error)
            return False

        cutoff = datetime.fromtimestamp(since_epoch_ms / 1000, tz=timezone.utc)
        logger.info("user_tokens_invalidated", user_id=user_id, issued_before=cutoff.isoformat())
        return True

    async def is_token_invalidated_by_sign_update(self, user_id: str, token_issued_at_seconds: int) -> bool:
        """
        Check a token's issue time against the user's cutoff.

        Args:
            user_id: Token subject
            token_issued_at_seconds: The token's ``iat`` claim, in epoch seconds

        Returns:
            True when the token was issued strictly before the cutoff
        """
        result = await self.cache.get(f"{SIGN_UPDATE_PREFIX}{user_id}")
        if not result.success or not result.value:
            return False

        try:
            cutoff_ms = int(result.value)
        except ValueError:
            logger.warning("sign_update_record_corrupt", user_id=user_id)
            return False

        return token_issued_at_seconds * 1000 < cutoff_ms

    async def is_token_revoked(self, token_id: str, user_id: str, token_issued_at_seconds: int) -> bool:
        if await self.is_blacklisted(token_id):
            return True
        return await self.is_token_invalidated_by_sign_update(user_id, token_issued_at_seconds)
