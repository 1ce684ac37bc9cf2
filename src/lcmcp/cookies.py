"""Read LeetCode session cookies from a Chromium-based browser's cookie store."""

import hashlib
import logging
import shutil
import sqlite3
import subprocess
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path

from Crypto.Cipher import AES

from lcmcp.exceptions import CookieError

logger = logging.getLogger(__name__)

CSRF_COOKIE = "csrftoken"
SESSION_COOKIE = "LEETCODE_SESSION"


@dataclass(frozen=True)
class BrowserSpec:
    name: str
    linux_dir: str
    macos_dir: str
    safe_storage: str


BROWSERS = {
    "chrome": BrowserSpec("chrome", "google-chrome", "Google/Chrome", "Chrome"),
    "edge": BrowserSpec("edge", "microsoft-edge", "Microsoft Edge", "Microsoft Edge"),
    "brave": BrowserSpec("brave", "BraveSoftware/Brave-Browser", "BraveSoftware/Brave-Browser", "Brave"),
    "chromium": BrowserSpec("chromium", "chromium", "Chromium", "Chromium"),
}


@dataclass(frozen=True)
class BrowserInfo:
    """A detected browser profile and its cookie database."""

    name: str
    cookie_path: Path
    safe_storage: str


def _user_data_dir(spec: BrowserSpec) -> Path | None:
    if sys.platform.startswith("linux"):
        return Path.home() / ".config" / spec.linux_dir
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / spec.macos_dir
    return None


def _cookie_db(user_data_dir: Path, profile: str) -> Path | None:
    # Chrome 96+ moved the database under Network/
    for candidate in (
        user_data_dir / profile / "Network" / "Cookies",
        user_data_dir / profile / "Cookies",
    ):
        if candidate.exists():
            return candidate
    return None


def find_browser(preference: str = "auto", profile: str = "Default") -> BrowserInfo | None:
    """Find the first installed browser with a cookie database for `profile`.

    `preference` is a key of BROWSERS, or "auto" to try them all in order.
    """
    if preference == "auto":
        specs = list(BROWSERS.values())
    elif preference in BROWSERS:
        specs = [BROWSERS[preference]]
    else:
        logger.warning("Unknown browser %r in config", preference)
        return None

    for spec in specs:
        user_data_dir = _user_data_dir(spec)
        if user_data_dir is None:
            continue
        cookie_path = _cookie_db(user_data_dir, profile)
        if cookie_path:
            logger.debug("Found %s cookies at %s", spec.name, cookie_path)
            return BrowserInfo(spec.name, cookie_path, spec.safe_storage)

    return None


def extract_leetcode_cookies(browser: BrowserInfo, domain: str = "leetcode.com") -> tuple[str, str]:
    """Return (csrftoken, LEETCODE_SESSION) for `domain` from the browser's store."""
    key = _derive_encryption_key(browser.safe_storage)

    try:
        cookies = _read_cookies_from_db(browser.cookie_path, key, domain)
    except (sqlite3.Error, OSError) as e:
        raise CookieError(
            f"Cannot read {browser.name} cookies ({e}).\n"
            f"Close {browser.name} completely and retry, or save the cookies manually."
        ) from e

    csrf_token = cookies.get(CSRF_COOKIE)
    session_token = cookies.get(SESSION_COOKIE)

    if not csrf_token or not session_token:
        raise CookieError(
            f"LeetCode cookies not found in {browser.name}.\n"
            f"Log in to {domain} in {browser.name} and retry, or copy '{CSRF_COOKIE}' and "
            f"'{SESSION_COOKIE}' from DevTools (Application → Cookies) and save them manually."
        )

    return csrf_token, session_token


def _derive_encryption_key(safe_storage: str) -> bytes:
    if sys.platform == "darwin":
        password = _get_macos_keychain_password(safe_storage)
        if not password:
            raise CookieError(f"Could not read '{safe_storage} Safe Storage' from the macOS keychain")
        iterations = 1003
    else:
        password = _get_keyring_password(safe_storage) or b"peanuts"
        iterations = 1

    return hashlib.pbkdf2_hmac(
        hash_name="sha1",
        password=password,
        salt=b"saltysalt",
        iterations=iterations,
        dklen=16,
    )


def _get_keyring_password(safe_storage: str) -> bytes | None:
    """Look up the browser's Safe Storage secret in the freedesktop keyring."""
    label = f"{safe_storage} Safe Storage"
    try:
        import secretstorage

        connection = secretstorage.dbus_init()
        collection = secretstorage.get_default_collection(connection)

        if collection.is_locked():
            collection.unlock()

        for item in collection.get_all_items():
            if item.get_label() == label:
                return item.get_secret()
    except Exception as e:  # no D-Bus session, no keyring daemon, etc.
        logger.debug("Keyring lookup for %r failed: %s", label, e)

    return None


def _get_macos_keychain_password(safe_storage: str) -> bytes | None:
    try:
        result = subprocess.run(
            ["security", "find-generic-password", "-w", "-s", f"{safe_storage} Safe Storage"],
            capture_output=True,
            text=True,
            timeout=10,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug("Keychain lookup failed: %s", e)
        return None

    if result.returncode != 0:
        return None
    return result.stdout.strip().encode()


def _read_cookies_from_db(cookie_path: Path, encryption_key: bytes, domain: str) -> dict[str, str]:
    # The live database is locked while the browser runs; read a copy
    with tempfile.NamedTemporaryFile(delete=False, suffix=".db") as tmp_file:
        tmp_path = Path(tmp_file.name)

    try:
        shutil.copy2(cookie_path, tmp_path)

        conn = sqlite3.connect(tmp_path)
        try:
            strip_host_digest = _db_version(conn) >= 24
            rows = conn.execute(
                "SELECT name, value, encrypted_value FROM cookies "
                "WHERE host_key IN (?, ?) AND name IN (?, ?)",
                (f".{domain}", domain, CSRF_COOKIE, SESSION_COOKIE),
            ).fetchall()
        finally:
            conn.close()

        cookies: dict[str, str] = {}
        for name, value, encrypted_value in rows:
            if value:
                cookies[name] = value
            elif encrypted_value:
                decrypted = _decrypt_cookie_value(encrypted_value, encryption_key, strip_host_digest)
                if decrypted:
                    cookies[name] = decrypted
        return cookies
    finally:
        tmp_path.unlink(missing_ok=True)


def _db_version(conn: sqlite3.Connection) -> int:
    try:
        row = conn.execute("SELECT value FROM meta WHERE key = 'version'").fetchone()
    except sqlite3.OperationalError:
        return 0
    return int(row[0]) if row else 0


def _decrypt_cookie_value(encrypted_value: bytes, key: bytes, strip_host_digest: bool = False) -> str | None:
    if encrypted_value[:3] in (b"v10", b"v11"):
        encrypted_value = encrypted_value[3:]
    else:
        return encrypted_value.decode("utf-8", errors="ignore")

    if len(encrypted_value) < 16 or len(encrypted_value) % 16:
        return None

    cipher = AES.new(key, AES.MODE_CBC, b" " * 16)
    decrypted = _remove_pkcs7_padding(cipher.decrypt(encrypted_value))

    # Database version 24+ prefixes the plaintext with SHA256(host_key)
    if strip_host_digest:
        decrypted = decrypted[32:]

    try:
        return decrypted.decode("utf-8")
    except UnicodeDecodeError:
        return None


def _remove_pkcs7_padding(data: bytes) -> bytes:
    if not data:
        return data

    padding_length = data[-1]

    if padding_length > 16 or padding_length == 0:
        return data

    if data[-padding_length:] != bytes([padding_length]) * padding_length:
        return data

    return data[:-padding_length]
