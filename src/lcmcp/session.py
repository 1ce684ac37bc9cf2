"""Session manager coordinating LeetCode authorization and credential status."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

from lcmcp.auth_sessions import AuthSessionRegister
from lcmcp.browser import open_default_browser
from lcmcp.cookies import BrowserInfo, extract_leetcode_cookies, find_browser
from lcmcp.credentials import CredentialStore
from lcmcp.exceptions import CookieError, LeetCodeError
from lcmcp.models import Credentials
from lcmcp.storage import SITES, Storage
from lcmcp.validator import validate_credentials

logger = logging.getLogger(__name__)

Validator = Callable[..., Awaitable[str | None]]

MANUAL_INSTRUCTIONS = {
    "step1": "Log in to LeetCode in your browser",
    "step2_devtools": "Open DevTools (F12 or Cmd+Option+I on Mac)",
    "step3_navigate": "Go to: Application → Cookies → the LeetCode site",
    "step4_find": "Find the 'csrftoken' and 'LEETCODE_SESSION' cookies",
    "step5_save": "Call save_leetcode_credentials with both values",
}

EXPIRY_WARNING = (
    "Credentials may expire soon (typical lifetime: 7-14 days). "
    "If you encounter authentication errors, please re-authenticate."
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _error(reason: str, message: str, remediation: str) -> dict[str, Any]:
    return {
        "status": "error",
        "reason": reason,
        "message": message,
        "remediation": remediation,
    }


class SessionManager:
    """Coordinates authentication and provides authenticated LeetCode clients.

    Supports two ways in: a two-step browser flow (start, then confirm by
    scraping cookies from the local browser) and pasting the cookie pair
    directly. Both end in the same validate-then-save step.
    """

    def __init__(
        self,
        storage: Storage | None = None,
        credential_store: CredentialStore | None = None,
        auth_sessions: AuthSessionRegister | None = None,
        validator: Validator = validate_credentials,
        browser_finder: Callable[[str, str], BrowserInfo | None] = find_browser,
        cookie_extractor: Callable[[BrowserInfo, str], tuple[str, str]] = extract_leetcode_cookies,
        browser_launcher: Callable[[str], None] = open_default_browser,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._storage = storage or Storage()
        self._store = credential_store or CredentialStore(self._storage)
        self._auth_sessions = auth_sessions or AuthSessionRegister()
        self._validator = validator
        self._find_browser = browser_finder
        self._extract_cookies = cookie_extractor
        self._open_browser = browser_launcher
        self._clock = clock

    @property
    def credential_store(self) -> CredentialStore:
        return self._store

    @property
    def base_url(self) -> str:
        return self._storage.base_url()

    @property
    def login_url(self) -> str:
        return f"{self.base_url}/accounts/login/"

    def _try_open_browser(self, url: str) -> bool:
        try:
            self._open_browser(url)
            return True
        except LeetCodeError as e:
            logger.warning("Could not open browser: %s", e.message)
            return False

    async def _validate_and_save(self, csrf_token: str, session_token: str) -> str | None:
        """Validate the pair and persist it on success. Returns the username."""
        username = await self._validator(csrf_token, session_token, base_url=self.base_url)
        if not username:
            return None

        site = self._storage.get_config().site
        self._store.save(
            Credentials(
                csrf_token=csrf_token,
                session_token=session_token,
                created_at=self._clock(),
                site=site,
            )
        )
        logger.info("Authenticated as %s", username)
        return username

    def start_authorization(self) -> dict[str, Any]:
        """Begin the browser login flow. Returns without waiting for the user."""
        session_id = self._auth_sessions.create()
        login_url = self.login_url
        browser_opened = self._try_open_browser(login_url)

        return {
            "status": "awaiting_login",
            "sessionId": session_id,
            "browserOpened": browser_opened,
            "loginUrl": login_url,
            "expiresInSeconds": int(self._auth_sessions.ttl),
            "instructions": {
                "confirm": (
                    "After logging in, call confirm_leetcode_auth with this sessionId "
                    "to read the cookies from your browser."
                ),
                "manual": MANUAL_INSTRUCTIONS,
            },
        }

    async def confirm_authorization(self, session_id: str) -> dict[str, Any]:
        """Finish the browser flow by reading and validating the browser's cookies."""
        if self._auth_sessions.get(session_id) is None:
            return _error(
                "session_expired",
                "Authorization session is invalid or has expired.",
                "Call start_leetcode_auth again and confirm within 5 minutes.",
            )

        config = self._storage.get_config()
        browser = self._find_browser(config.browser, config.profile)
        if browser is None:
            return _error(
                "browser_not_found",
                "No supported browser (Chrome, Edge, Brave, Chromium) was found.",
                "Copy 'csrftoken' and 'LEETCODE_SESSION' from DevTools and call "
                "save_leetcode_credentials instead.",
            )

        domain = SITES[config.site].split("://", 1)[1]
        try:
            csrf_token, session_token = await asyncio.to_thread(self._extract_cookies, browser, domain)
        except CookieError as e:
            return _error(
                "cookie_error",
                e.message,
                "Make sure you are logged in, then retry confirm_leetcode_auth, "
                "or use save_leetcode_credentials with values copied from DevTools.",
            )

        username = await self._validate_and_save(csrf_token, session_token)
        if not username:
            return _error(
                "invalid_credentials",
                f"Cookies found in {browser.name} were rejected by LeetCode.",
                "Log in to LeetCode in that browser again, then retry confirm_leetcode_auth.",
            )

        self._auth_sessions.clear(session_id)
        return {
            "status": "success",
            "username": username,
            "browser": browser.name,
            "message": f"Successfully authenticated as {username}.",
        }

    async def save_credentials(self, csrf_token: str, session_token: str) -> dict[str, Any]:
        """Validate and save a cookie pair the user copied by hand."""
        csrf_token = csrf_token.strip()
        session_token = session_token.strip()
        if not csrf_token or not session_token:
            return _error(
                "invalid_credentials",
                "Both csrftoken and LEETCODE_SESSION are required.",
                "Copy both cookie values from DevTools and try again.",
            )

        username = await self._validate_and_save(csrf_token, session_token)
        if not username:
            return _error(
                "invalid_credentials",
                "Invalid credentials. Please ensure you are logged into LeetCode "
                "and copied the correct cookie values.",
                "Make sure to copy the entire value of both cookies, not just the visible portion.",
            )

        return {
            "status": "success",
            "username": username,
            "message": f"Successfully authenticated as {username}! Your credentials have been saved.",
        }

    async def check_auth_status(self) -> dict[str, Any]:
        """Report whether stored credentials exist, still validate, and how old they are."""
        credentials = self._store.load()
        if credentials is None:
            return {
                "authenticated": False,
                "message": "No credentials found. Please use start_leetcode_auth to authenticate.",
            }

        username = await self._validator(
            credentials.csrf_token,
            credentials.session_token,
            base_url=SITES.get(credentials.site or "global", self.base_url),
        )
        if not username:
            return {
                "authenticated": False,
                "expired": True,
                "message": "Credentials have expired. Please authenticate again using start_leetcode_auth.",
            }

        age_days = credentials.age_days(self._clock())
        warning_days = self._storage.get_config().expiry_warning_days

        return {
            "authenticated": True,
            "username": username,
            "ageDays": age_days,
            "message": f"Authenticated as {username}. Credentials are valid.",
            "warning": EXPIRY_WARNING if age_days >= warning_days else None,
        }

    def clear_credentials(self) -> dict[str, Any]:
        """Forget the stored credentials (logout)."""
        self._store.clear()
        return {"status": "success", "message": "Credentials cleared."}

