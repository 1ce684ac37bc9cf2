"""Async LeetCode API client for authenticated calls."""

import logging
from typing import Any

import httpx

from lcmcp.exceptions import ProblemNotFoundError, SessionExpiredError, SubmissionError
from lcmcp.storage import SITES

logger = logging.getLogger(__name__)

BASE_URL = SITES["global"]

USER_STATUS_QUERY = """
query globalData {
  userStatus {
    username
    isSignedIn
  }
}
"""

QUESTION_ID_QUERY = """
query questionTitle($titleSlug: String!) {
  question(titleSlug: $titleSlug) {
    questionId
    questionFrontendId
  }
}
"""


class LeetCodeClient:
    """Client for LeetCode's GraphQL and judge endpoints.

    Use as an async context manager so the underlying connection pool is
    closed when the caller is done.
    """

    def __init__(
        self,
        session_token: str,
        csrf_token: str,
        base_url: str = BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._session_token = session_token
        self._csrf_token = csrf_token
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            headers=self._build_headers(),
            timeout=30.0,
            transport=transport,
        )

    @property
    def graphql_endpoint(self) -> str:
        return f"{self.base_url}/graphql/"

    def _build_headers(self) -> dict[str, str]:
        return {
            "Cookie": f"csrftoken={self._csrf_token}; LEETCODE_SESSION={self._session_token}",
            "X-CSRFToken": self._csrf_token,
            "Referer": self.base_url,
            "Content-Type": "application/json",
        }

    def _check_response_auth(self, response: httpx.Response) -> None:
        if response.status_code in (401, 403):
            raise SessionExpiredError()

    async def __aenter__(self) -> "LeetCodeClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _graphql(self, query: str, variables: dict[str, Any] | None = None, referer: str | None = None) -> dict[str, Any]:
        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables
        headers = {"Referer": referer} if referer else None

        response = await self._client.post(self.graphql_endpoint, json=payload, headers=headers)
        self._check_response_auth(response)
        response.raise_for_status()
        return response.json()

    async def fetch_user_status(self) -> dict[str, Any]:
        """Return the `userStatus` object for the current cookies."""
        data = await self._graphql(USER_STATUS_QUERY)
        return (data.get("data") or {}).get("userStatus") or {}

    async def get_question_id(self, slug: str) -> str:
        """Resolve a problem slug to LeetCode's internal question id."""
        data = await self._graphql(
            QUESTION_ID_QUERY,
            {"titleSlug": slug},
            referer=f"{self.base_url}/problems/{slug}/",
        )
        question = (data.get("data") or {}).get("question")

        if not question or not question.get("questionId"):
            raise ProblemNotFoundError(slug)

        return str(question["questionId"])

    async def submit(self, slug: str, question_id: str, code: str, language: str) -> str:
        """Submit code for judging. Returns the submission id to poll."""
        submit_url = f"{self.base_url}/problems/{slug}/submit/"
        payload = {
            "lang": language,
            "question_id": question_id,
            "typed_code": code,
        }

        response = await self._client.post(
            submit_url,
            json=payload,
            headers={"Referer": f"{self.base_url}/problems/{slug}/"},
        )
        self._check_response_auth(response)

        if response.status_code != 200:
            raise SubmissionError(f"Failed to submit: HTTP {response.status_code}")

        data = response.json()
        submission_id = data.get("submission_id")

        if not submission_id:
            raise SubmissionError("No submission ID returned")

        logger.debug("Submitted %s as submission %s", slug, submission_id)
        return str(submission_id)

    async def check_submission(self, submission_id: str) -> dict[str, Any]:
        """Fetch the current judging state of a submission."""
        check_url = f"{self.base_url}/submissions/detail/{submission_id}/check/"

        response = await self._client.get(check_url)
        self._check_response_auth(response)
        response.raise_for_status()

        return response.json()
