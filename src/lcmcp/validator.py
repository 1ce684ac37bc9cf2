"""Check a cookie pair against LeetCode and recover the username."""

import logging

import httpx

from lcmcp.client import BASE_URL, LeetCodeClient
from lcmcp.exceptions import LeetCodeError

logger = logging.getLogger(__name__)


async def validate_credentials(
    csrf_token: str,
    session_token: str,
    *,
    base_url: str = BASE_URL,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str | None:
    """Return the signed-in username, or None if LeetCode doesn't accept the pair.

    Invalid credentials are an expected outcome, so every failure (HTTP error,
    network error, unexpected payload) is folded into None.
    """
    try:
        async with LeetCodeClient(session_token, csrf_token, base_url, transport) as client:
            user_status = await client.fetch_user_status()
    except (httpx.HTTPError, LeetCodeError, ValueError, AttributeError) as e:
        logger.warning("Credential validation failed: %s", e)
        return None

    if not isinstance(user_status, dict):
        return None

    username = user_status.get("username")
    if user_status.get("isSignedIn") is True and isinstance(username, str) and username:
        return username

    logger.debug("LeetCode reports not signed in")
    return None
