"""
Named scenario persistence on top of a pluggable key-value store.

Storage layout (string keys → JSON strings):
  spendwise_scenario_list_v2            → sorted list of scenario names
  spendwise_scenario_data_v2_<name>     → SavedScenario record

The index is kept separate from the records so listing never has to scan
or parse every record. Storage failures (unreadable file, malformed JSON)
are logged and surface as an empty list, None or False, never as a crash.
A failed save leaves the previous record in place, and an unreadable index
is rebuilt from the record keys. Single user, last write wins.
"""

import json
import logging
import os
import tempfile
from typing import Optional

from spendwise.models import SavedScenario, ValidationError

logger = logging.getLogger(__name__)

SCENARIO_LIST_KEY = "spendwise_scenario_list_v2"
SCENARIO_DATA_PREFIX = "spendwise_scenario_data_v2_"


# ═══════════════════════════════════════════════════════════════════════════════
# KEY-VALUE STORES
# ═══════════════════════════════════════════════════════════════════════════════

class KeyValueStore:
    """Narrow string key-value interface the scenario store depends on."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str):
        raise NotImplementedError

    def delete(self, key: str) -> bool:
        """Remove a key. Returns True if it existed."""
        raise NotImplementedError

    def list_keys(self) -> list[str]:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    """Dict-backed store; used by tests and as a session-only fallback."""

    def __init__(self, initial=None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key):
        return self._data.get(key)

    def set(self, key, value):
        self._data[key] = value

    def delete(self, key):
        return self._data.pop(key, None) is not None

    def list_keys(self):
        return sorted(self._data)


class JsonFileStore(KeyValueStore):
    """All keys in one JSON object on disk.

    Every read reloads the file; every write rewrites it through a temp
    file + os.replace so a crash never leaves a half-written document.
    """

    def __init__(self, path):
        self.path = os.fspath(path)

    def _read(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not contain a JSON object")
        return data

    def _write(self, data: dict):
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".spendwise-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def get(self, key):
        return self._read().get(key)

    def set(self, key, value):
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key):
        data = self._read()
        if key not in data:
            return False
        del data[key]
        self._write(data)
        return True

    def list_keys(self):
        return sorted(self._read())


# ═══════════════════════════════════════════════════════════════════════════════
# SCENARIO STORE
# ═══════════════════════════════════════════════════════════════════════════════

class ScenarioStore:
    """Save / load / list / delete named scenarios."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    @staticmethod
    def record_key(name: str) -> str:
        return SCENARIO_DATA_PREFIX + name

    def list_scenario_names(self) -> list[str]:
        """Saved scenario names, sorted. Empty if the index is missing."""
        return self._read_index()[0]

    def _read_index(self) -> tuple[list[str], bool]:
        """Return (names, intact).

        An unreadable index is rebuilt from the record keys, so one corrupt
        value does not hide every scenario; `intact` is then False.
        """
        try:
            raw = self.store.get(SCENARIO_LIST_KEY)
            if raw is None:
                return [], True
            names = json.loads(raw)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read scenario index: %s", exc)
            return self._names_from_records(), False
        if not isinstance(names, list):
            logger.warning("Scenario index is not a list; rebuilding it from records")
            return self._names_from_records(), False
        return sorted(str(n) for n in names), True

    def _names_from_records(self) -> list[str]:
        try:
            keys = self.store.list_keys()
        except (OSError, ValueError) as exc:
            logger.warning("Could not list scenario records: %s", exc)
            return []
        return sorted(k[len(SCENARIO_DATA_PREFIX):] for k in keys if k.startswith(SCENARIO_DATA_PREFIX))

    def _write_index(self, names) -> bool:
        try:
            self.store.set(SCENARIO_LIST_KEY, json.dumps(sorted(names)))
        except (OSError, ValueError) as exc:
            logger.warning("Could not write scenario index: %s", exc)
            return False
        return True

    def _restore_record(self, key: str, previous: Optional[str]):
        """Put a record back to its value before a failed save."""
        try:
            if previous is None:
                self.store.delete(key)
            else:
                self.store.set(key, previous)
        except (OSError, ValueError) as exc:
            logger.warning("Could not roll back %s: %s", key, exc)

    def save_scenario(self, scenario: SavedScenario) -> bool:
        """Write (or overwrite) a scenario under its name.

        Raises ValidationError for a blank name. Returns False if storage
        could not be written; the record is then left as it was.
        """
        if not scenario.name or not scenario.name.strip():
            raise ValidationError("Enter a scenario name before saving.")

        key = self.record_key(scenario.name)
        try:
            previous = self.store.get(key)
            self.store.set(key, json.dumps(scenario.to_record()))
        except (OSError, ValueError) as exc:
            logger.warning("Could not save scenario %r: %s", scenario.name, exc)
            return False

        names, intact = self._read_index()
        if scenario.name not in names or not intact:
            if scenario.name not in names:
                names.append(scenario.name)
            if not self._write_index(names):
                self._restore_record(key, previous)
                return False
        logger.info("Saved scenario %r", scenario.name)
        return True

    def load_scenario(self, name: str) -> Optional[SavedScenario]:
        """Return the stored scenario, or None if it is absent or unreadable."""
        try:
            raw = self.store.get(self.record_key(name))
        except (OSError, ValueError) as exc:
            logger.warning("Could not read scenario %r: %s", name, exc)
            return None
        if raw is None:
            return None
        try:
            return SavedScenario.from_record(json.loads(raw))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Scenario %r is malformed: %s", name, exc)
            return None

    def delete_scenario(self, name: str) -> bool:
        """Remove the record and its index entry. Returns True if a record existed."""
        try:
            existed = self.store.delete(self.record_key(name))
        except (OSError, ValueError) as exc:
            logger.warning("Could not delete scenario %r: %s", name, exc)
            return False

        names, intact = self._read_index()
        if name in names or not intact:
            if name in names:
                names.remove(name)
            self._write_index(names)
        if existed:
            logger.info("Deleted scenario %r", name)
        return existed
