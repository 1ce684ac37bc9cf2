"""Persistent storage for the LeetCode credential record."""

import json
import logging
import os
import tempfile
from pathlib import Path

from lcmcp.exceptions import CredentialsError
from lcmcp.models import Credentials
from lcmcp.storage import Storage

logger = logging.getLogger(__name__)


class CredentialStore:
    """Keeps exactly one credential record in an owner-only JSON file."""

    def __init__(self, storage: Storage | None = None) -> None:
        self._storage = storage or Storage()

    @property
    def path(self) -> Path:
        return self._storage.credentials_path

    def exists(self) -> bool:
        """Check if a credential record is saved."""
        return self.path.is_file()

    def load(self) -> Credentials | None:
        """Load the saved record. Returns None when there is none.

        Raises CredentialsError if the file exists but can't be parsed.
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CredentialsError(f"Failed to read credentials: {e}") from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CredentialsError(f"Malformed credentials file {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise CredentialsError(f"Malformed credentials file {self.path}")

        return Credentials.from_dict(data)

    def save(self, credentials: Credentials) -> None:
        """Replace the saved record with `credentials`.

        The record is written to a temp file next to the target and renamed
        over it, so readers see either the old record or the new one.
        """
        directory = self.path.parent
        try:
            directory.mkdir(mode=0o700, parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=".credentials-", suffix=".tmp")
        except OSError as e:
            raise CredentialsError(f"Failed to save credentials: {e}") from e

        tmp_path = Path(tmp_name)
        try:
            # mkstemp already creates the file 0600
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(credentials.to_dict(), f, indent=2)
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self.path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise CredentialsError(f"Failed to save credentials: {e}") from e

        logger.info("Saved credentials to %s", self.path)

    def clear(self) -> None:
        """Remove the saved record, if any."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            return
        logger.info("Cleared credentials at %s", self.path)
