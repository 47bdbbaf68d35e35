"""Storage for persisted block lists.

The blocker reads and writes its lists through the OptionStore protocol so
the host application can keep them wherever it keeps its settings. A JSON
file store is provided for standalone deployments.

Storage file format (ipblocker.json):
    {
        "options": {
            "blocked_xff_ips": ["1.2.3.4", "10.0.0.0/8"],
            "blocked_ra_ips": ["192.168.1.100"]
        }
    }
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol

BLOCKED_XFF_IPS = "blocked_xff_ips"
BLOCKED_RA_IPS = "blocked_ra_ips"
BLOCKED_HTACCESS_XFF_IPS = "blocked_htaccess_xff_ips"

OPTION_NAMES = (BLOCKED_XFF_IPS, BLOCKED_RA_IPS, BLOCKED_HTACCESS_XFF_IPS)


class OptionStore(Protocol):
    """Named settings values supplied by the host."""

    def get_option(self, name: str, default: Any = None) -> Any: ...

    def update_option(self, name: str, value: Any) -> None: ...

    def delete_option(self, name: str) -> bool: ...


class MemoryOptionStore:
    """In-process option store."""

    def __init__(self, options: dict[str, Any] | None = None) -> None:
        self._options: dict[str, Any] = dict(options or {})

    def get_option(self, name: str, default: Any = None) -> Any:
        return self._options.get(name, default)

    def update_option(self, name: str, value: Any) -> None:
        self._options[name] = value

    def delete_option(self, name: str) -> bool:
        if name not in self._options:
            return False
        del self._options[name]
        return True


class JsonOptionStore:
    """JSON file-based option store.

    The file is read on every access, so edits made by another process are
    picked up on the next request.
    """

    def __init__(self, storage_path: str | Path = "ipblocker.json") -> None:
        """Initialize option store.

        Args:
            storage_path: Path to the JSON storage file.
        """
        self.storage_path = Path(storage_path)

    def _load(self) -> dict[str, Any]:
        if not self.storage_path.exists():
            return {}

        content = self.storage_path.read_text(encoding="utf-8")
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {self.storage_path}: {e}") from e
        options = data.get("options", {}) if isinstance(data, dict) else {}
        return options if isinstance(options, dict) else {}

    def _save(self, options: dict[str, Any]) -> None:
        content = json.dumps({"options": options}, indent=2)
        self.storage_path.write_text(content, encoding="utf-8")

    def get_option(self, name: str, default: Any = None) -> Any:
        return self._load().get(name, default)

    def update_option(self, name: str, value: Any) -> None:
        options = self._load()
        options[name] = value
        self._save(options)

    def delete_option(self, name: str) -> bool:
        options = self._load()
        if name not in options:
            return False
        del options[name]
        self._save(options)
        return True
