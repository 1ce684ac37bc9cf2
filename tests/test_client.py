"""Tests for the async LeetCode API client."""

import asyncio
import json

import httpx
import pytest

from lcmcp.client import BASE_URL, LeetCodeClient
from lcmcp.exceptions import ProblemNotFoundError, SessionExpiredError, SubmissionError


def _client(handler) -> LeetCodeClient:
    return LeetCodeClient(
        session_token="test_session",
        csrf_token="test_csrf",
        transport=httpx.MockTransport(handler),
    )


def _run(client: LeetCodeClient, call):
    async def go():
        async with client:
            return await call(client)

    return asyncio.run(go())


class TestHeaders:
    """Tests for authentication headers."""

    def test_every_request_is_authenticated(self):
        """Test requests carry the session cookies and CSRF header."""
        seen: list[httpx.Request] = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"state": "PENDING"})

        _run(_client(handler), lambda c: c.check_submission("1"))

        headers = seen[0].headers
        assert headers["Cookie"] == "csrftoken=test_csrf; LEETCODE_SESSION=test_session"
        assert headers["X-CSRFToken"] == "test_csrf"
        assert headers["Referer"] == BASE_URL


class TestGetQuestionId:
    """Tests for LeetCodeClient.get_question_id()."""

    def test_resolves_numeric_id(self):
        """Test get_question_id() returns the numeric id as a string."""
        seen: list[httpx.Request] = []

        def handler(request):
            seen.append(request)
            return httpx.Response(
                200, json={"data": {"question": {"questionId": "1", "questionFrontendId": "1"}}}
            )

        question_id = _run(_client(handler), lambda c: c.get_question_id("two-sum"))

        assert question_id == "1"
        assert str(seen[0].url) == f"{BASE_URL}/graphql/"
        payload = json.loads(seen[0].content)
        assert payload["variables"] == {"titleSlug": "two-sum"}
        assert seen[0].headers["Referer"] == f"{BASE_URL}/problems/two-sum/"

    def test_unknown_slug_raises_not_found(self):
        """Test a null question raises ProblemNotFoundError."""
        def handler(request):
            return httpx.Response(200, json={"data": {"question": None}})

        with pytest.raises(ProblemNotFoundError) as exc_info:
            _run(_client(handler), lambda c: c.get_question_id("no-such-problem"))

        assert exc_info.value.slug == "no-such-problem"

    @pytest.mark.parametrize("status_code", [401, 403])
    def test_auth_failure_raises_session_expired(self, status_code):
        """Test a 401 from GraphQL raises SessionExpiredError."""
        def handler(request):
            return httpx.Response(status_code)

        with pytest.raises(SessionExpiredError):
            _run(_client(handler), lambda c: c.get_question_id("two-sum"))

    def test_server_error_raises_http_error(self):
        """Test a 5xx response raises httpx.HTTPStatusError."""
        def handler(request):
            return httpx.Response(500)

        with pytest.raises(httpx.HTTPStatusError):
            _run(_client(handler), lambda c: c.get_question_id("two-sum"))


class TestSubmit:
    """Tests for LeetCodeClient.submit()."""

    def test_posts_payload_and_returns_id(self):
        """Test submit() posts the payload and returns the submission id."""
        seen: list[httpx.Request] = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"submission_id": 123456789})

        submission_id = _run(_client(handler), lambda c: c.submit("two-sum", "1", "print(1)", "python3"))

        assert submission_id == "123456789"
        assert str(seen[0].url) == f"{BASE_URL}/problems/two-sum/submit/"
        assert json.loads(seen[0].content) == {
            "lang": "python3",
            "question_id": "1",
            "typed_code": "print(1)",
        }

    def test_unauthorized(self):
        """Test a 401 raises SessionExpiredError."""
        def handler(request):
            return httpx.Response(401)

        with pytest.raises(SessionExpiredError):
            _run(_client(handler), lambda c: c.submit("two-sum", "1", "x", "python3"))

    def test_non_200_raises_submission_error(self):
        """Test a non-200 submit response raises SubmissionError."""
        def handler(request):
            return httpx.Response(429, json={})

        with pytest.raises(SubmissionError) as exc_info:
            _run(_client(handler), lambda c: c.submit("two-sum", "1", "x", "python3"))

        assert "HTTP 429" in exc_info.value.message

    def test_missing_submission_id(self):
        """Test a response without submission_id raises SubmissionError."""
        def handler(request):
            return httpx.Response(200, json={"error": "rate limited"})

        with pytest.raises(SubmissionError):
            _run(_client(handler), lambda c: c.submit("two-sum", "1", "x", "python3"))


class TestCheckSubmission:
    """Tests for LeetCodeClient.check_submission()."""

    def test_returns_payload(self):
        """Test check_submission() returns the JSON body."""
        seen: list[httpx.Request] = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"state": "SUCCESS", "status_msg": "Accepted"})

        data = _run(_client(handler), lambda c: c.check_submission("42"))

        assert data["state"] == "SUCCESS"
        assert seen[0].method == "GET"
        assert str(seen[0].url) == f"{BASE_URL}/submissions/detail/42/check/"

    def test_unauthorized(self):
        """Test a 401 raises SessionExpiredError."""
        def handler(request):
            return httpx.Response(403)

        with pytest.raises(SessionExpiredError):
            _run(_client(handler), lambda c: c.check_submission("42"))


class TestFetchUserStatus:
    """Tests for LeetCodeClient.fetch_user_status()."""

    def test_returns_user_status(self):
        """Test fetch_user_status() returns the userStatus object."""
        def handler(request):
            return httpx.Response(200, json={"data": {"userStatus": {"username": "alice", "isSignedIn": True}}})

        status = _run(_client(handler), lambda c: c.fetch_user_status())

        assert status == {"username": "alice", "isSignedIn": True}

    def test_missing_user_status_is_empty(self):
        """Test a missing userStatus yields an empty dict."""
        def handler(request):
            return httpx.Response(200, json={"data": None})

        assert _run(_client(handler), lambda c: c.fetch_user_status()) == {}
