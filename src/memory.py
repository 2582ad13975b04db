# memory.py — Flat key-value memory persisted to a text file
import os
import re
from pathlib import Path
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from dotenv import load_dotenv

load_dotenv()

MEMORY_FILE = os.getenv("MEMORY_FILE", "memory.txt")

NOT_FOUND = "[Not found]"
NO_MEMORIES = "No memories"
HEADER_PREFIX = "# Memory - "

_LINE_BREAKS = re.compile(r"[\r\n]+")


def normalize_key(key: str) -> str:
    """Trim, lowercase and make a key representable as one `key=value` line."""
    key = _LINE_BREAKS.sub(" ", key).strip().lower()
    return key.replace("=", "-")


def _normalize_value(value: str) -> str:
    return _LINE_BREAKS.sub(" ", value).strip()


def parse_memory_lines(lines) -> Dict[str, str]:
    """
    Parse `key=value` records. Blank lines and `#` comments are ignored;
    lines without `=` are skipped. Split happens on the first `=`.
    """
    entries: Dict[str, str] = {}
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip().lower()
        if not key:
            continue
        entries[key] = value.strip()
    return entries


def format_memory_file(entries: Dict[str, str], timestamp: Optional[datetime] = None) -> str:
    """Render the full file: timestamp header, then one record per line."""
    stamp = (timestamp or datetime.now()).isoformat(timespec="seconds")
    lines = [f"{HEADER_PREFIX}{stamp}"]
    lines.extend(f"{k}={v}" for k, v in entries.items())
    return "\n".join(lines) + "\n"


class MemoryStore:
    """
    Mapping of lowercase keys to values backed by a text file.

    Every mutation rewrites the whole file before returning. A failed write
    is reported on the error console and the in-memory state stays
    authoritative for the rest of the session. If an existing file cannot
    be read, the store never overwrites it.
    """

    def __init__(self, path=MEMORY_FILE):
        self.path = Path(path)
        self._entries: Dict[str, str] = {}
        self.last_error: Optional[str] = None
        self._load_failed = False

    @classmethod
    def from_file(cls, path=MEMORY_FILE) -> "MemoryStore":
        store = cls(path)
        store.load()
        return store

    def load(self) -> Dict:
        """
        Replace current entries with the backing file's records.
        A missing file leaves the store empty and is not an error.
        """
        self._entries = {}
        self._load_failed = False
        if not self.path.exists():
            return {"success": True, "count": 0}
        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            self._load_failed = True
            return self._report({"success": False, "error": str(e)}, "loading")
        self._entries = parse_memory_lines(text.splitlines())
        return {"success": True, "count": len(self._entries)}

    def save(self) -> Dict:
        """
        Rewrite the backing file. Returns dict with 'success' and optional 'error'.
        Refused while the existing file could not be loaded.
        """
        if self._load_failed:
            return self._report(
                {"success": False, "error": "existing file could not be loaded; not overwriting it"},
                "saving",
            )
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(format_memory_file(self._entries), encoding="utf-8")
            self.last_error = None
            return {"success": True}
        except OSError as e:
            return self._report({"success": False, "error": str(e)}, "saving")

    def _report(self, result: Dict, action: str) -> Dict:
        from ui import display_error
        self.last_error = result["error"]
        display_error(f"Error {action} memory ({self.path}): {result['error']}")
        return result

    def get(self, key: str) -> Optional[str]:
        return self._entries.get(normalize_key(key))

    def recall(self, key: str) -> str:
        """Value for key (any case), or the not-found sentinel."""
        value = self.get(key)
        return NOT_FOUND if value is None else value

    def set(self, key: str, value: str) -> Dict:
        key = normalize_key(key)
        if not key:
            raise ValueError("key is required")
        self._entries[key] = _normalize_value(value)
        return self.save()

    def clear(self) -> Dict:
        self._entries.clear()
        return self.save()

    def items(self) -> List[Tuple[str, str]]:
        return list(self._entries.items())

    def as_dict(self) -> Dict[str, str]:
        return dict(self._entries)

    def render_context(self) -> str:
        """Comma-separated `key: value` pairs for the prompt, or 'No memories'."""
        if not self._entries:
            return NO_MEMORIES
        return ", ".join(f"{k}: {v}" for k, v in self._entries.items())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key) -> bool:
        return normalize_key(key) in self._entries
