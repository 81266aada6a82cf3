"""
JSON file gateway: stores the account as a single JSON document.

Writes go to a temporary file next to the target and are moved into place
with os.replace, so a failed save never leaves a half-written file behind.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from stocksim.errors import PersistenceCorruptError, PersistenceWriteError
from stocksim.persistence.codec import account_from_record, account_to_record
from stocksim.persistence.gateway import PersistenceGateway
from stocksim.persistence.types import LoadResult, LoadStatusKind, SaveResult, SaveStatusKind
from stocksim.portfolio import Account

logger = logging.getLogger(__name__)

DEFAULT_PORTFOLIO_FILE = "portfolio.json"


class JsonFileGateway(PersistenceGateway):
    """Account persistence in one JSON file (default: portfolio.json in the working directory)."""

    def __init__(self, path: str | Path = DEFAULT_PORTFOLIO_FILE) -> None:
        self.path = Path(path)

    def load(self) -> LoadResult:
        if not self.path.exists():
            logger.info("No saved portfolio at %s", self.path)
            return LoadResult(status=LoadStatusKind.ABSENT, message=f"No saved portfolio at {self.path}")
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return LoadResult(status=LoadStatusKind.ABSENT, message=f"No saved portfolio at {self.path}")
        except UnicodeDecodeError as e:
            reason = f"Saved portfolio is not valid UTF-8: {e}"
            logger.warning("Portfolio load failed: %s", reason)
            return LoadResult(status=LoadStatusKind.CORRUPT, message=reason)
        except OSError as e:
            reason = f"Cannot read {self.path}: {e}"
            logger.warning("Portfolio load failed: %s", reason)
            return LoadResult(status=LoadStatusKind.UNAVAILABLE, message=reason)

        try:
            account = account_from_record(json.loads(text))
        except json.JSONDecodeError as e:
            reason = f"Saved portfolio is not valid JSON: {e}"
            logger.warning("Portfolio load failed: %s", reason)
            return LoadResult(status=LoadStatusKind.CORRUPT, message=reason)
        except (ValueError, RecursionError) as e:
            # oversized integer literals and pathologically nested documents
            reason = f"Saved portfolio cannot be decoded: {type(e).__name__}"
            logger.warning("Portfolio load failed: %s", reason)
            return LoadResult(status=LoadStatusKind.CORRUPT, message=reason)
        except PersistenceCorruptError as e:
            reason = f"Saved portfolio is malformed: {e}"
            logger.warning("Portfolio load failed: %s", reason)
            return LoadResult(status=LoadStatusKind.CORRUPT, message=reason)

        logger.info("Portfolio loaded for %s from %s", account.owner, self.path)
        return LoadResult(status=LoadStatusKind.LOADED, account=account)

    def save(self, account: Account) -> SaveResult:
        try:
            self._write(json.dumps(account_to_record(account), indent=2))
        except PersistenceWriteError as e:
            logger.warning("Portfolio save failed: %s", e)
            return SaveResult(status=SaveStatusKind.WRITE_FAILED, message=str(e))
        logger.info("Portfolio saved for %s to %s", account.owner, self.path)
        return SaveResult(status=SaveStatusKind.OK, message=f"Portfolio saved to {self.path}")

    def _write(self, text: str) -> None:
        """Atomically replace the target file with text."""
        directory = self.path.parent if str(self.path.parent) else Path(".")
        tmp_name: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=directory,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceWriteError(f"Cannot write {self.path}: {e}") from e
