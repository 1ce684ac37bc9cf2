"""Data models for LeetCode MCP."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Union

from lcmcp.exceptions import CredentialsError

AUTH_SESSION_TTL_SECONDS = 300.0


@dataclass(frozen=True)
class Credentials:
    """The CSRF/session cookie pair that authenticates every LeetCode call."""

    csrf_token: str
    session_token: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    site: Optional[str] = "global"

    def __post_init__(self) -> None:
        if not self.csrf_token or not self.session_token:
            raise CredentialsError("Both csrftoken and LEETCODE_SESSION are required")

    def age_days(self, now: datetime) -> int:
        """Whole days elapsed since the credentials were saved."""
        return max(0, (now - self.created_at).days)

    def to_dict(self) -> dict[str, Any]:
        return {
            "csrftoken": self.csrf_token,
            "LEETCODE_SESSION": self.session_token,
            "createdAt": self.created_at.isoformat(),
            "site": self.site,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Credentials":
        try:
            created_at = datetime.fromisoformat(data["createdAt"].replace("Z", "+00:00"))
        except (KeyError, AttributeError, ValueError) as e:
            raise CredentialsError(f"Invalid createdAt in credentials: {e}") from e
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)

        return cls(
            csrf_token=data.get("csrftoken") or "",
            session_token=data.get("LEETCODE_SESSION") or "",
            created_at=created_at,
            site=data.get("site"),
        )


@dataclass
class AuthSession:
    """A pending browser login, correlating start and confirm calls."""

    session_id: str
    created_at: float
    ttl: float = AUTH_SESSION_TTL_SECONDS

    def is_expired(self, now: float) -> bool:
        return now - self.created_at >= self.ttl


class Outcome(str, Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    ERROR = "error"
    AUTHORIZATION_REQUIRED = "authorization_required"
    UNSUPPORTED_LANGUAGE = "unsupported_language"
    TIMEOUT = "timeout"
    UNAUTHORIZED = "unauthorized"
    TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class FailedTestCase:
    """The first test case a rejected submission got wrong."""

    input: str
    expected: str
    actual: str


@dataclass(frozen=True)
class Accepted:
    runtime: Optional[str]
    memory: Optional[str]
    outcome = Outcome.ACCEPTED
    status_msg = "Accepted"

    def to_dict(self) -> dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "accepted": True,
            "statusMessage": self.status_msg,
            "runtime": self.runtime,
            "memory": self.memory,
        }


@dataclass(frozen=True)
class Rejected:
    """Judged and not accepted: wrong answer, time limit, and so on."""

    status_msg: str
    failed_test_case: Optional[FailedTestCase] = None
    stdout: str = ""
    total_correct: Optional[int] = None
    total_testcases: Optional[int] = None
    outcome = Outcome.REJECTED

    def to_dict(self) -> dict[str, Any]:
        failed = None
        if self.failed_test_case:
            failed = {
                "input": self.failed_test_case.input,
                "expected": self.failed_test_case.expected,
                "actual": self.failed_test_case.actual,
            }
        return {
            "outcome": self.outcome.value,
            "accepted": False,
            "statusMessage": self.status_msg,
            "failedTestCase": failed,
            "stdout": self.stdout or None,
            "testCasesPassed": self.total_correct,
            "totalTestCases": self.total_testcases,
        }


@dataclass(frozen=True)
class JudgeError:
    """Compile or runtime error reported by the judge."""

    status_msg: str
    detail: str = ""
    outcome = Outcome.ERROR

    def to_dict(self) -> dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "accepted": False,
            "statusMessage": self.status_msg,
            "errorMessage": self.detail or None,
        }


@dataclass(frozen=True)
class AuthorizationRequired:
    message: str = "Not authorized. Please run authorization first."
    outcome = Outcome.AUTHORIZATION_REQUIRED
    status_msg = "Authorization Required"

    def to_dict(self) -> dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "accepted": False,
            "statusMessage": self.status_msg,
            "errorMessage": self.message,
        }


@dataclass(frozen=True)
class UnsupportedLanguage:
    language: str
    outcome = Outcome.UNSUPPORTED_LANGUAGE
    status_msg = "Invalid Language"

    def to_dict(self) -> dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "accepted": False,
            "statusMessage": self.status_msg,
            "errorMessage": f"Unsupported language: {self.language}",
        }


@dataclass(frozen=True)
class TimedOut:
    attempts: int
    outcome = Outcome.TIMEOUT
    status_msg = "Timeout"

    def to_dict(self) -> dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "accepted": False,
            "statusMessage": self.status_msg,
            "errorMessage": f"Submission check timed out after {self.attempts} attempts",
        }


@dataclass(frozen=True)
class Unauthorized:
    message: str = "Session expired. Please re-authorize."
    outcome = Outcome.UNAUTHORIZED
    status_msg = "Unauthorized"

    def to_dict(self) -> dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "accepted": False,
            "statusMessage": self.status_msg,
            "errorMessage": self.message,
        }


@dataclass(frozen=True)
class SubmissionFailed:
    message: str
    status_msg: str = "Submission Failed"
    outcome = Outcome.TRANSPORT_ERROR

    def to_dict(self) -> dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "accepted": False,
            "statusMessage": self.status_msg,
            "errorMessage": self.message,
        }


SubmissionResult = Union[
    Accepted,
    Rejected,
    JudgeError,
    AuthorizationRequired,
    UnsupportedLanguage,
    TimedOut,
    Unauthorized,
    SubmissionFailed,
]


@dataclass
class Config:
    """User configuration, stored in config.json."""

    language: str
    browser: str
    profile: str
    site: str
    expiry_warning_days: int
