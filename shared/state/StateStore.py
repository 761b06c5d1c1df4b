"""Small persisted key-value state, stored as a JSON file."""

import json
import os

from shared.helper.HelperConfig import HelperConfig


class StateStore:
    """
    Key-value store for local markers such as the last daily status update.

    The file is created on the first write. A missing or unreadable file reads as empty.
    """

    def __init__(self, helper_config: HelperConfig, path: str | None = None):
        self.logging = helper_config.get_logger()
        self._path = path or helper_config.get_state_file()

    def get(self, key: str) -> str | None:
        """
        Returns the stored value of a key, or None if it was never set.
        """
        value = self._load().get(key)
        return str(value) if value is not None else None

    def set(self, key: str, value: str) -> None:
        """
        Stores a value and writes the whole state file.

        Raises:
            OSError: If the state file cannot be written.
        """
        state = self._load()
        state[key] = value
        directory = os.path.dirname(self._path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self._path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(state, f, indent=2, sort_keys=True)
        os.replace(tmp_path, self._path)

    def _load(self) -> dict:
        if not os.path.exists(self._path):
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                state = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self.logging.warning("Local state file '%s' is unreadable, starting empty: %s", self._path, e)
            return {}
        if not isinstance(state, dict):
            self.logging.warning("Local state file '%s' does not hold an object, starting empty.", self._path)
            return {}
        return state
