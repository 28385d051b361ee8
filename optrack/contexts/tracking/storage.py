"""
Per-user persistence for opportunity records and profiles.

Data lives in a flat string key-value store (the same contract as a browser's
localStorage). Keys are namespaced by the signed-in account:

    {prefix}::{user_id}            -> JSON array of Opportunity objects
    {prefix}-profile::{user_id}    -> JSON object (Profile)
    {prefix}-current-user          -> JSON object (UserIdentity), un-namespaced

Writes replace the whole value. Malformed stored values are treated as empty
and logged; they never raise into the caller.

Usage:
    from optrack.contexts.tracking.storage import JsonFileStore, TrackerStorage

    storage = TrackerStorage(JsonFileStore(Path("~/.optrack/store.json")))
    records = storage.load_opportunities("google-1234")
"""

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from optrack.contexts.tracking.logger import _log_debug, _log_warning
from optrack.contexts.tracking.opportunity import Opportunity, Profile, UserIdentity

DEFAULT_PREFIX = "opportunity-tracker"


class KeyValueStore(Protocol):
    """String key-value store with localStorage semantics."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStore:
    """In-process store, used by tests and dry runs."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._items)


class JsonFileStore:
    """
    Key-value store persisted as a single JSON object on disk.

    Every write rewrites the file through a temp file, so a crash mid-write
    leaves the previous contents intact.
    """

    def __init__(self, path: Path):
        self.path = Path(path).expanduser()

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            _log_warning(f"Store file unreadable, treating as empty: {self.path} ({e})")
            return {}
        if not isinstance(data, dict):
            _log_warning(f"Store file is not a JSON object, treating as empty: {self.path}")
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, items: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_fd, temp_path = tempfile.mkstemp(suffix=".json", dir=self.path.parent, text=True)
        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                json.dump(items, f, indent=2, sort_keys=True)

            # Only overwrite original if write succeeded
            shutil.move(temp_path, self.path)
        except Exception:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise

    def get_item(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = str(value)
        self._write_all(items)

    def remove_item(self, key: str) -> None:
        items = self._read_all()
        if key in items:
            del items[key]
            self._write_all(items)

    def keys(self) -> List[str]:
        return list(self._read_all())


class TrackerStorage:
    """
    Persistence adapter: the only component that touches the key-value store.

    Args:
        store: Backing key-value store
        prefix: Namespace prefix for all keys
    """

    def __init__(self, store: KeyValueStore, prefix: str = DEFAULT_PREFIX):
        self.store = store
        self.prefix = prefix

    # =========================================================================
    # KEY LAYOUT
    # =========================================================================

    def opportunities_key(self, user_id: str) -> str:
        return f"{self.prefix}::{user_id}"

    def profile_key(self, user_id: str) -> str:
        return f"{self.prefix}-profile::{user_id}"

    @property
    def current_user_key(self) -> str:
        return f"{self.prefix}-current-user"

    # =========================================================================
    # OPPORTUNITIES
    # =========================================================================

    def load_opportunities(self, user_id: str) -> List[Opportunity]:
        """
        Load a user's record list in stored (newest-first) order.

        Non-object entries are skipped. A record whose id repeats an earlier
        one is given a fresh id so ids stay unique within the list.
        """
        key = self.opportunities_key(user_id)
        data = self._load_json(key)
        if data is None:
            return []
        if not isinstance(data, list):
            _log_warning(f"Expected a list at {key}, got {type(data).__name__}; ignoring")
            return []

        records = []
        seen_ids = set()
        for index, item in enumerate(data):
            if not isinstance(item, dict):
                _log_warning(f"Skipping malformed record #{index} at {key}")
                continue
            record = Opportunity.from_dict(item)
            if record.id in seen_ids:
                _log_warning(f"Duplicate record id {record.id} at {key}; assigning a new id")
                record = Opportunity.from_dict({**item, "id": ""})
            seen_ids.add(record.id)
            records.append(record)

        _log_debug(f"Loaded {len(records)} record(s) for {user_id}")
        return records

    def save_opportunities(self, user_id: str, records) -> None:
        """Replace the stored record list (assessments are not written)."""
        payload = [record.to_dict() for record in records]
        self.store.set_item(self.opportunities_key(user_id), json.dumps(payload))
        _log_debug(f"Saved {len(payload)} record(s) for {user_id}")

    def clear_opportunities(self, user_id: str) -> None:
        self.store.remove_item(self.opportunities_key(user_id))

    # =========================================================================
    # PROFILE
    # =========================================================================

    def load_profile(self, user_id: str) -> Profile:
        key = self.profile_key(user_id)
        data = self._load_json(key)
        if data is None:
            return Profile()
        if not isinstance(data, dict):
            _log_warning(f"Expected an object at {key}, got {type(data).__name__}; ignoring")
            return Profile()
        return Profile.from_dict(data)

    def save_profile(self, user_id: str, profile: Profile) -> None:
        self.store.set_item(self.profile_key(user_id), json.dumps(profile.to_dict()))

    # =========================================================================
    # CURRENT USER
    # =========================================================================

    def load_current_user(self) -> Optional[UserIdentity]:
        data = self._load_json(self.current_user_key)
        if data is None:
            return None
        try:
            return UserIdentity.from_dict(data)
        except (ValueError, AttributeError, TypeError) as e:
            _log_warning(f"Ignoring malformed signed-in user record: {e}")
            return None

    def save_current_user(self, identity: UserIdentity) -> None:
        self.store.set_item(self.current_user_key, json.dumps(identity.to_dict()))

    def clear_current_user(self) -> None:
        self.store.remove_item(self.current_user_key)

    # =========================================================================
    # INTERNAL HELPERS
    # =========================================================================

    def _load_json(self, key: str):
        raw = self.store.get_item(key)
        if raw is None or raw == "":
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            _log_warning(f"Stored value at {key} is not valid JSON; treating as empty ({e})")
            return None
