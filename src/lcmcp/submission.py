"""Submit solutions to LeetCode and poll the judge for a verdict."""

import asyncio
import logging
from typing import Any, Awaitable, Callable

import httpx

from lcmcp.client import LeetCodeClient
from lcmcp.credentials import CredentialStore
from lcmcp.exceptions import LeetCodeError, SessionExpiredError
from lcmcp.models import (
    Accepted,
    AuthorizationRequired,
    Credentials,
    FailedTestCase,
    JudgeError,
    Rejected,
    SubmissionFailed,
    SubmissionResult,
    TimedOut,
    Unauthorized,
    UnsupportedLanguage,
)
from lcmcp.storage import SITES

logger = logging.getLogger(__name__)

LANGUAGE_MAP = {
    "java": "java",
    "python": "python3",
    "python3": "python3",
    "cpp": "cpp",
    "c++": "cpp",
    "c": "c",
    "csharp": "csharp",
    "c#": "csharp",
    "javascript": "javascript",
    "js": "javascript",
    "typescript": "typescript",
    "ts": "typescript",
    "go": "golang",
    "golang": "golang",
    "rust": "rust",
    "kotlin": "kotlin",
    "swift": "swift",
    "ruby": "ruby",
}

MAX_POLL_ATTEMPTS = 30
POLL_INTERVAL_SECONDS = 1.0

ERROR_STATUSES = ("Compile Error", "Runtime Error")

ClientFactory = Callable[[Credentials], LeetCodeClient]


def _default_client_factory(credentials: Credentials) -> LeetCodeClient:
    return LeetCodeClient(
        credentials.session_token,
        credentials.csrf_token,
        SITES.get(credentials.site or "global", SITES["global"]),
    )


def _output(data: dict[str, Any], text_key: str, list_key: str) -> str:
    """Read a judge output, which comes either as text or as one line per test case."""
    text = data.get(text_key)
    if text:
        return text
    lines = data.get(list_key)
    if isinstance(lines, list):
        return "\n".join(str(line) for line in lines)
    return lines or ""


def parse_submission_result(data: dict[str, Any]) -> SubmissionResult:
    """Classify a terminal check response."""
    status_msg = data.get("status_msg") or "Unknown"

    if status_msg == "Accepted":
        return Accepted(
            runtime=data.get("status_runtime") or data.get("runtime"),
            memory=data.get("status_memory") or data.get("memory"),
        )

    if status_msg in ERROR_STATUSES:
        detail = (
            data.get("full_compile_error")
            or data.get("compile_error")
            or data.get("full_runtime_error")
            or data.get("runtime_error")
            or ""
        )
        return JudgeError(status_msg=status_msg, detail=detail)

    failed_test_case = None
    test_input = data.get("input_formatted") or data.get("last_testcase") or data.get("input")
    if test_input:
        failed_test_case = FailedTestCase(
            input=test_input,
            expected=_output(data, "expected_output", "expected_answer"),
            actual=_output(data, "code_output", "code_answer"),
        )

    return Rejected(
        status_msg=status_msg,
        failed_test_case=failed_test_case,
        stdout=data.get("std_output") or "",
        total_correct=data.get("total_correct"),
        total_testcases=data.get("total_testcases"),
    )


class SubmissionOrchestrator:
    """Runs one submission from stored credentials to a terminal verdict.

    Every outcome, including failures, comes back as a SubmissionResult value.
    """

    def __init__(
        self,
        credential_store: CredentialStore | None = None,
        client_factory: ClientFactory = _default_client_factory,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        max_attempts: int = MAX_POLL_ATTEMPTS,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        resolve_question_id: bool = True,
    ) -> None:
        self._store = credential_store or CredentialStore()
        self._client_factory = client_factory
        self._sleep = sleep
        self.max_attempts = max_attempts
        self.poll_interval = poll_interval
        self.resolve_question_id = resolve_question_id

    async def submit(self, problem_slug: str, code: str, language: str) -> SubmissionResult:
        try:
            credentials = self._store.load()
        except LeetCodeError as e:
            return SubmissionFailed(message=e.message, status_msg="Error")

        if credentials is None:
            return AuthorizationRequired()

        lang = LANGUAGE_MAP.get(language.strip().lower())
        if lang is None:
            return UnsupportedLanguage(language=language)

        try:
            async with self._client_factory(credentials) as client:
                if self.resolve_question_id:
                    question_id = await client.get_question_id(problem_slug)
                else:
                    question_id = problem_slug
                submission_id = await client.submit(problem_slug, question_id, code, lang)
                return await self._poll(client, submission_id)
        except SessionExpiredError:
            return Unauthorized()
        except LeetCodeError as e:
            return SubmissionFailed(message=e.message)
        except httpx.HTTPError as e:
            return SubmissionFailed(message=str(e))
        except Exception as e:
            logger.exception("Unexpected error submitting %s", problem_slug)
            return SubmissionFailed(message=str(e), status_msg="Error")

    async def _poll(self, client: LeetCodeClient, submission_id: str) -> SubmissionResult:
        for attempt in range(1, self.max_attempts + 1):
            await self._sleep(self.poll_interval)

            data = await client.check_submission(submission_id)
            state = data.get("state")

            if state == "SUCCESS":
                logger.debug("Submission %s judged after %d checks", submission_id, attempt)
                return parse_submission_result(data)

            # PENDING, STARTED: keep polling

        logger.warning("Submission %s not judged after %d checks", submission_id, self.max_attempts)
        return TimedOut(attempts=self.max_attempts)
