"""MCP server exposing LeetCode authorization and submission as tools."""

import logging
from typing import Annotated, Any

from fastmcp import FastMCP
from pydantic import Field

from lcmcp.log import setup_logging
from lcmcp.session import SessionManager
from lcmcp.submission import SubmissionOrchestrator

logger = logging.getLogger(__name__)

AUTH_GUIDE = """# LeetCode Authentication Guide

LeetCode has no public OAuth API, so authentication uses the two session
cookies from the user's browser: `csrftoken` and `LEETCODE_SESSION`.

## Option A: read cookies from the browser
1. Call `start_leetcode_auth`. It opens the login page (when possible) and
   returns a `sessionId` that is valid for 5 minutes.
2. Ask the user to log in to LeetCode in Chrome, Edge, Brave or Chromium.
3. Once they confirm, call `confirm_leetcode_auth` with the `sessionId`.
4. If it returns `status: "error"`, follow its `remediation`. For
   `session_expired`, start over. For `browser_not_found` or `cookie_error`,
   switch to option B.

## Option B: paste cookies manually
1. Ask the user to open DevTools (F12, or Cmd+Option+I on Mac).
2. Application tab (Storage in Firefox) → Cookies → the LeetCode site.
3. Copy the full values of `csrftoken` and `LEETCODE_SESSION`.
4. Call `save_leetcode_credentials` with both values.

## Afterwards
- Greet the user by the `username` the tool returns.
- Credentials usually last 7-14 days. When a tool reports `unauthorized` or
  `authorization_required`, call `check_auth_status` and re-authenticate.
- Credentials are stored locally in ~/.leetcode-mcp/credentials.json with
  owner-only permissions. Never echo cookie values back to the user.
"""


def create_server(
    session_manager: SessionManager | None = None,
    orchestrator: SubmissionOrchestrator | None = None,
) -> FastMCP:
    """Build the FastMCP server with auth tools, submission, and the auth guide."""
    sessions = session_manager or SessionManager()
    submitter = orchestrator or SubmissionOrchestrator(sessions.credential_store)

    mcp = FastMCP("LeetCode MCP")

    @mcp.tool(
        name="start_leetcode_auth",
        description=(
            "Starts LeetCode authentication. Opens the login page in the default browser "
            "(if possible) and returns a sessionId to pass to confirm_leetcode_auth after "
            "the user has logged in, plus manual DevTools instructions as a fallback."
        ),
    )
    def start_leetcode_auth() -> dict[str, Any]:
        return sessions.start_authorization()

    @mcp.tool(
        name="confirm_leetcode_auth",
        description=(
            "Completes browser authentication: reads LeetCode cookies from the local "
            "browser, validates them and saves them. Requires the sessionId from "
            "start_leetcode_auth, valid for 5 minutes."
        ),
    )
    async def confirm_leetcode_auth(
        session_id: Annotated[str, Field(description="The sessionId returned by start_leetcode_auth")],
    ) -> dict[str, Any]:
        return await sessions.confirm_authorization(session_id)

    @mcp.tool(
        name="save_leetcode_credentials",
        description=(
            "Validates and saves LeetCode cookies the user copied from browser DevTools. "
            "Validation makes a test call to LeetCode before anything is stored."
        ),
    )
    async def save_leetcode_credentials(
        csrftoken: Annotated[str, Field(min_length=1, description="CSRF token from LeetCode cookies (csrftoken)")],
        session: Annotated[str, Field(min_length=1, description="Session token from LeetCode cookies (LEETCODE_SESSION)")],
    ) -> dict[str, Any]:
        return await sessions.save_credentials(csrftoken, session)

    @mcp.tool(
        name="check_auth_status",
        description=(
            "Checks whether saved LeetCode credentials exist and are still valid. Returns "
            "the username, credential age in days, and a warning when they may expire soon."
        ),
    )
    async def check_auth_status() -> dict[str, Any]:
        return await sessions.check_auth_status()

    @mcp.tool(
        name="clear_leetcode_credentials",
        description="Deletes the saved LeetCode credentials (logout).",
    )
    def clear_leetcode_credentials() -> dict[str, Any]:
        return sessions.clear_credentials()

    @mcp.tool(
        name="submit_solution",
        description=(
            "Submits a solution to a LeetCode problem and waits up to 30 seconds for the "
            "verdict. Returns acceptance with runtime/memory, or the failing test case, "
            "compile/runtime error, or an authorization error."
        ),
    )
    async def submit_solution(
        problem_slug: Annotated[str, Field(description='The problem slug (e.g., "two-sum")')],
        code: Annotated[str, Field(description="The solution code to submit")],
        language: Annotated[str, Field(description="Programming language (java, python, cpp, javascript, typescript, ...)")],
    ) -> dict[str, Any]:
        result = await submitter.submit(problem_slug, code, language)
        logger.info("Submission of %s finished: %s", problem_slug, result.outcome.value)
        return result.to_dict()

    @mcp.resource(
        "leetcode://auth/status",
        name="auth_status",
        description="Current LeetCode authentication status",
        mime_type="application/json",
    )
    async def auth_status() -> dict[str, Any]:
        return await sessions.check_auth_status()

    @mcp.prompt(
        name="leetcode_authentication_guide",
        description="Step-by-step instructions for guiding a user through LeetCode authentication",
    )
    def leetcode_authentication_guide() -> str:
        return AUTH_GUIDE

    return mcp


def main() -> None:
    setup_logging()
    create_server().run()


if __name__ == "__main__":
    main()
