"""Local file system implementation of StateStore."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ..domain.entities.app_state import AppState, default_state
from ..domain.exceptions import PersistenceError
from ..domain.interfaces.state_store import StateStore

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "spaced_reading_db"


class LocalStateStore(StateStore):
    """Local JSON-file implementation of the StateStore protocol.

    The file holds one JSON object with the state under ``storage_key``.
    A file that cannot be read or validated is renamed to ``<name>.corrupt``
    so the next save does not overwrite it, and the default state is used.
    """

    def __init__(
        self,
        path: Union[str, Path] = "spaced_reading_state.json",
        storage_key: str = DEFAULT_STORAGE_KEY,
    ):
        """Initialize the local state store.

        Args:
            path: Location of the JSON state file.
            storage_key: Key the state is stored under inside the file.
        """
        self.path = Path(path)
        self.storage_key = storage_key

    def load(self) -> AppState:
        """Load the state from disk, falling back to the default state."""
        try:
            state = self._read()
        except PersistenceError as e:
            logger.error(f"Failed to load state: {e}")
            self._quarantine()
            return default_state()

        if state is None:
            logger.info(f"No stored state at {self.path}, starting fresh")
            return default_state()
        return state

    def save(self, state: AppState) -> None:
        """Save the state to disk. Failures are logged and dropped."""
        try:
            self._write(state)
        except PersistenceError as e:
            logger.error(f"Failed to save state: {e}")

    def _read(self) -> Optional[AppState]:
        if not self.path.exists():
            return None

        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise PersistenceError(
                f"Could not read state file {self.path}", {"error": str(e)}
            ) from e

        if not isinstance(document, dict):
            raise PersistenceError(f"State file {self.path} does not hold a JSON object")

        payload = document.get(self.storage_key)
        if payload is None:
            return None

        try:
            return AppState.model_validate(payload)
        except PydanticValidationError as e:
            raise PersistenceError(
                f"Stored state in {self.path} is malformed",
                {"errors": e.error_count()},
            ) from e

    def _write(self, state: AppState) -> None:
        document = {self.storage_key: state.model_dump(mode="json")}
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                delete=False,
            ) as tmp:
                tmp_path = tmp.name
                json.dump(document, tmp, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise PersistenceError(
                f"Could not write state file {self.path}", {"error": str(e)}
            ) from e

    def _quarantine(self) -> None:
        if not self.path.exists():
            return
        target = self.path.with_name(self.path.name + ".corrupt")
        try:
            os.replace(self.path, target)
            logger.warning(f"Moved unreadable state file to {target}")
        except OSError as e:
            logger.error(f"Could not move unreadable state file {self.path}: {e}")
