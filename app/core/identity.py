"""Sequential human-readable identifiers."""

from enum import Enum
from threading import Lock


class EntityKind(str, Enum):
    """Entity kinds with their own identifier sequence."""

    APPOINTMENT = "CON"
    PATIENT = "PAC"
    DOCTOR = "MED"


class IdentityRegistry:
    """
    Owns one counter per entity kind and hands out identifiers.

    Identifiers look like ``CON-001``; the numeric part is zero-padded to
    ``width`` digits and simply grows past it (``CON-1000``). Numbers are
    never reused within the lifetime of a registry.
    """

    def __init__(self, width: int = 3):
        """Initialize every counter at 1."""
        self.width = width
        self._counters: dict[EntityKind, int] = {kind: 1 for kind in EntityKind}
        self._lock = Lock()

    def peek(self, kind: EntityKind) -> str:
        """Return the identifier the next allocation will produce."""
        with self._lock:
            return self._format(kind, self._counters[kind])

    def allocate(self, kind: EntityKind) -> str:
        """Consume and return the next identifier for ``kind``."""
        with self._lock:
            number = self._counters[kind]
            self._counters[kind] = number + 1
        return self._format(kind, number)

    def reset(self, kind: EntityKind | None = None) -> None:
        """Restart one counter, or all of them."""
        with self._lock:
            kinds = [kind] if kind else list(EntityKind)
            for item in kinds:
                self._counters[item] = 1

    def _format(self, kind: EntityKind, number: int) -> str:
        return f"{kind.value}-{number:0{self.width}d}"

    @staticmethod
    def normalize(identifier: str) -> str:
        """Canonical lookup form of an identifier (trimmed, upper-case)."""
        return identifier.strip().upper()
