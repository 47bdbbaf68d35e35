"""Read-modify-write of the rules file.

Content is read and written with ``newline=""`` and ``surrogateescape`` so
bytes outside the rule block survive unchanged. The new content goes to a
temporary file beside the target and is moved into place with
``os.replace``, so readers see either the old file or the new one. An
exclusive advisory lock on ``<name>.lock`` is held for the whole
read-modify-write sequence.
"""

from __future__ import annotations

import contextlib
import fcntl
import os
import stat
import tempfile
from collections.abc import Iterator, Sequence
from pathlib import Path

import structlog

from ipblocker.htaccess.block import apply_rule_block, remove_rule_block
from ipblocker.security.sanitize import RuleSet, sanitize

logger = structlog.get_logger()

_ENCODING = "utf-8"
_ERRORS = "surrogateescape"
_DEFAULT_MODE = 0o644


@contextlib.contextmanager
def _exclusive_lock(path: Path) -> Iterator[None]:
    """Hold an exclusive flock on ``path`` until exit."""
    fh = open(path, "a+b")
    try:
        fcntl.flock(fh, fcntl.LOCK_EX)
        yield
    finally:
        fcntl.flock(fh, fcntl.LOCK_UN)
        fh.close()


class HtaccessFile:
    """An ``.htaccess`` file holding at most one rule block."""

    def __init__(self, path: str | Path = ".htaccess", lock: bool = True) -> None:
        self.path = Path(path)
        self.lock = lock

    @property
    def lock_path(self) -> Path:
        return self.path.with_name(self.path.name + ".lock")

    def _guard(self) -> contextlib.AbstractContextManager[None]:
        return _exclusive_lock(self.lock_path) if self.lock else contextlib.nullcontext()

    def read(self) -> str:
        with open(self.path, encoding=_ENCODING, errors=_ERRORS, newline="") as fh:
            return fh.read()

    def write(self, content: str) -> None:
        """Replace the file's content atomically, keeping its permissions."""
        mode = stat.S_IMODE(self.path.stat().st_mode) if self.path.exists() else _DEFAULT_MODE
        fd, tmp = tempfile.mkstemp(prefix=f"{self.path.name}.", suffix=".tmp", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding=_ENCODING, errors=_ERRORS, newline="") as fh:
                fh.write(content)
                fh.flush()
                os.fsync(fh.fileno())
            os.chmod(tmp, mode)
            os.replace(tmp, self.path)
        finally:
            if os.path.exists(tmp):
                os.remove(tmp)

    def apply(self, rules: RuleSet) -> bool:
        """Write ``rules`` into the file's rule block.

        The file is created when missing. Returns True if the content changed.
        """
        self.path.touch(exist_ok=True)
        with self._guard():
            content = self.read()
            updated = apply_rule_block(content, rules)
            if updated == content:
                return False
            self.write(updated)

        logger.info("Rule block written", path=str(self.path), rules=len(rules))
        return True

    def remove(self) -> bool:
        """Remove the rule block. A missing file is left missing."""
        if not self.path.exists():
            return False
        with self._guard():
            content = self.read()
            updated = remove_rule_block(content)
            if updated == content:
                return False
            self.write(updated)

        logger.info("Rule block removed", path=str(self.path))
        return True


def sanitize_and_persist(
    value: str | Sequence[str] | None,
    path: str | Path = ".htaccess",
    lock: bool = True,
) -> RuleSet:
    """Sanitize a block list and mirror it into the rules file.

    Returns:
        The sanitized RuleSet, for the caller to store.
    """
    rules = sanitize(value)
    HtaccessFile(path, lock=lock).apply(rules)
    return rules
