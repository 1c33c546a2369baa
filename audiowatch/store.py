"""In-memory collections of saved patterns and notification addresses."""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from .errors import DuplicateEmail, InvalidEmail
from .models import Pattern


class PatternStore:
    """Own the saved fingerprints in insertion order.

    Pattern ids are creation timestamps and are expected to be unique;
    callers must not add two patterns with the same id.
    """

    def __init__(self, patterns: Iterable[Pattern] = ()) -> None:
        self._patterns: list[Pattern] = list(patterns)

    def add(self, pattern: Pattern) -> None:
        self._patterns.append(pattern)

    def remove(self, pattern_id: int) -> None:
        self._patterns = [p for p in self._patterns if p.id != pattern_id]

    def get(self, pattern_id: int) -> Optional[Pattern]:
        for pattern in self._patterns:
            if pattern.id == pattern_id:
                return pattern
        return None

    def all(self) -> tuple[Pattern, ...]:
        return tuple(self._patterns)

    def __len__(self) -> int:
        return len(self._patterns)

    def __iter__(self) -> Iterator[Pattern]:
        return iter(tuple(self._patterns))


class EmailList:
    """Addresses that receive a message for every accepted detection."""

    def __init__(self, emails: Iterable[str] = ()) -> None:
        self._emails: list[str] = list(emails)

    def add(self, email: str) -> str:
        """Add ``email`` and return the normalised address.

        Raises:
            InvalidEmail: If the address is empty or lacks an ``@``.
            DuplicateEmail: If the address is already present.
        """
        email = (email or "").strip()
        if not email or "@" not in email:
            raise InvalidEmail(f"Not a valid email address: {email!r}")
        if email in self._emails:
            raise DuplicateEmail(f"Email already present: {email}")
        self._emails.append(email)
        return email

    def remove(self, email: str) -> None:
        self._emails = [e for e in self._emails if e != email]

    def all(self) -> tuple[str, ...]:
        return tuple(self._emails)

    def __len__(self) -> int:
        return len(self._emails)

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._emails))


__all__ = ["PatternStore", "EmailList"]
