"""JSON persistence of the configured emails and recorded patterns."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from .logger import get_logger
from .models import Pattern
from .utils import default_data_path

log = get_logger(__name__)


@dataclass
class SavedData:
    """Contents of the data file."""

    emails: list[str] = field(default_factory=list)
    patterns: list[Pattern] = field(default_factory=list)


class DataFile:
    """
    Read and write the ``{"emailList", "soundPatterns"}`` document.

    Args:
        path: Location of the JSON file; the per-user data directory is
            used when omitted.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else Path(default_data_path())

    def load(self) -> SavedData:
        """
        Load the saved emails and patterns.

        Returns:
            SavedData: Empty when the file does not exist yet.

        Raises:
            ValueError: If the file is not a JSON object or a pattern entry
                is malformed.
        """
        if not self.path.exists():
            log.debug("Data file %s not found, starting empty", self.path)
            return SavedData()

        try:
            with self.path.open(encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in data file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Data file {self.path} does not hold a JSON object")

        try:
            patterns = [Pattern.from_dict(p) for p in data.get("soundPatterns") or []]
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed pattern in data file {self.path}: {e}") from e
        emails = [str(e) for e in data.get("emailList") or []]

        log.info(
            "Loaded %d pattern(s) and %d email(s) from %s",
            len(patterns),
            len(emails),
            self.path,
        )
        return SavedData(emails=emails, patterns=patterns)

    def save(self, emails: Iterable[str], patterns: Iterable[Pattern]) -> None:
        """Write ``emails`` and ``patterns``, replacing the previous file."""
        document = {
            "emailList": list(emails),
            "soundPatterns": [p.to_dict() for p in patterns],
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(document, f)
        tmp_path.replace(self.path)
        log.debug("Saved data to %s", self.path)


__all__ = ["SavedData", "DataFile"]
