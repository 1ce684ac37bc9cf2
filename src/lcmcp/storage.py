"""Local configuration storage."""

import json
import os
from pathlib import Path

from lcmcp.exceptions import ConfigError
from lcmcp.models import Config

SITES = {
    "global": "https://leetcode.com",
    "cn": "https://leetcode.cn",
}

DEFAULT_CONFIG = Config(
    language="python3",
    browser="auto",
    profile="Default",
    site="global",
    expiry_warning_days=5,
)


def default_base_path() -> Path:
    """Return ~/.leetcode-mcp, or $LEETCODE_MCP_HOME when set."""
    override = os.environ.get("LEETCODE_MCP_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".leetcode-mcp"


class Storage:
    """Manages the local data directory and configuration."""

    def __init__(self, base_path: Path | None = None) -> None:
        self.base_path = base_path or default_base_path()
        self.config_path = self.base_path / "config.json"
        self.credentials_path = self.base_path / "credentials.json"

    def _ensure_dirs(self) -> None:
        self.base_path.mkdir(mode=0o700, parents=True, exist_ok=True)

    def get_config(self) -> Config:
        """Load config from config.json."""
        if not self.config_path.exists():
            return DEFAULT_CONFIG

        try:
            data = json.loads(self.config_path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError("expected a JSON object")
            expiry_warning_days = int(
                data.get("expiry_warning_days", DEFAULT_CONFIG.expiry_warning_days)
            )
        except (OSError, ValueError, TypeError) as e:
            raise ConfigError(f"Invalid config file {self.config_path}: {e}") from e

        site = data.get("site", DEFAULT_CONFIG.site)
        if site not in SITES:
            site = DEFAULT_CONFIG.site

        return Config(
            language=data.get("language", DEFAULT_CONFIG.language),
            browser=data.get("browser", DEFAULT_CONFIG.browser),
            profile=data.get("profile", DEFAULT_CONFIG.profile),
            site=site,
            expiry_warning_days=expiry_warning_days,
        )

    def save_config(self, config: Config) -> None:
        """Save config to config.json."""
        self._ensure_dirs()
        data = {
            "language": config.language,
            "browser": config.browser,
            "profile": config.profile,
            "site": config.site,
            "expiry_warning_days": config.expiry_warning_days,
        }
        self.config_path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def base_url(self) -> str:
        """Base URL of the configured LeetCode site."""
        return SITES[self.get_config().site]
