"""Open URLs in the operating system's default browser."""

import subprocess
import sys

from lcmcp.exceptions import BrowserLaunchError


def _launch_command(url: str) -> list[str]:
    if sys.platform == "darwin":
        return ["open", url]
    if sys.platform.startswith("linux"):
        return ["xdg-open", url]
    if sys.platform == "win32":
        return ["cmd", "/c", "start", "", url]
    raise BrowserLaunchError(f"Unsupported platform: {sys.platform}")


def open_default_browser(url: str) -> None:
    """Open `url` in the default browser without waiting for it.

    The launcher is detached from our stdio, since stdout is the MCP stream
    and the browser it starts may outlive the call. Raises BrowserLaunchError
    only when the launcher can't be started.
    """
    command = _launch_command(url)
    try:
        subprocess.Popen(
            command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as e:
        raise BrowserLaunchError(f"Failed to run {command[0]}: {e}") from e
