"""Custom exceptions for the leetcode-mcp application."""


class LeetCodeError(Exception):
    """Base exception for all leetcode-mcp errors."""

    def __init__(self, message: str = "An error occurred with LeetCode MCP") -> None:
        self.message = message
        super().__init__(self.message)


class SessionExpiredError(LeetCodeError):
    """Raised when LeetCode rejects the stored session (401/403)."""

    def __init__(
        self, message: str = "Session expired. Please re-authorize with start_leetcode_auth."
    ) -> None:
        super().__init__(message)


class ProblemNotFoundError(LeetCodeError):
    """Raised when a problem slug doesn't exist."""

    def __init__(self, slug: str | None = None) -> None:
        if slug:
            message = f"Problem not found: {slug}"
        else:
            message = "Problem not found"
        super().__init__(message)
        self.slug = slug


class CookieError(LeetCodeError):
    """Raised when cookies can't be read from the browser."""

    def __init__(
        self,
        message: str = "Failed to read cookies from the browser. Ensure you're logged into LeetCode.",
    ) -> None:
        super().__init__(message)


class SubmissionError(LeetCodeError):
    """Raised when the submit endpoint returns something unusable."""

    def __init__(self, message: str = "Submission failed") -> None:
        super().__init__(message)


class CredentialsError(LeetCodeError):
    """Raised when the credential record can't be written or is malformed on disk."""

    def __init__(self, message: str = "Credential storage error") -> None:
        super().__init__(message)


class BrowserLaunchError(LeetCodeError):
    """Raised when the default browser can't be opened on this platform."""

    def __init__(self, message: str = "Could not open the default browser") -> None:
        super().__init__(message)


class ConfigError(LeetCodeError):
    """Raised when config.json can't be read or parsed."""

    def __init__(self, message: str = "Invalid configuration file") -> None:
        super().__init__(message)
