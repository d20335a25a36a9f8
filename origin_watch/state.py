"""Persisted per-section "last seen" record."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Iterable, Optional

from .models import Section

log = logging.getLogger(__name__)

ObservedState = Dict[str, Optional[str]]


class StateStore:
    """Loads and commits the state file.

    The record is read once at run start and written once at the end of a
    successful run, replacing the previous content wholesale.
    """

    def __init__(self, path: Path, sections: Iterable[Section]):
        self.path = Path(path)
        self.sections = tuple(sections)

    def load(self) -> ObservedState:
        """Return the persisted mapping; any read or parse error yields an empty one."""
        try:
            if not self.path.exists():
                return {}
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            log.warning("Ignoring unreadable state file %s: %s", self.path, exc)
            return {}

        if not isinstance(data, dict):
            log.warning("Ignoring state file %s: expected an object, got %s", self.path, type(data).__name__)
            return {}

        return {
            str(key): value if isinstance(value, str) and value else None
            for key, value in data.items()
        }

    def is_bootstrap(self, state: ObservedState) -> bool:
        return not any(state.get(section.key) for section in self.sections)

    def commit(self, state: ObservedState) -> None:
        record = dict(state)
        for section in self.sections:
            record.setdefault(section.key, None)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(record, f, indent=2)
                f.write("\n")
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        log.info("Committed state for %d sections to %s", len(record), self.path)
