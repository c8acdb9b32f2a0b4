"""
Registry of the calendar backends known to the server.
"""
from typing import Dict, Iterable, List, Set

from groupcal.backends.base import CalendarBackend
from groupcal.exceptions import BackendNotFoundError


class BackendRegistry:
    """
    Ordered collection of backends plus the subset that is currently enabled.

    The first registered backend is the default one for new calendars.
    """

    def __init__(self, enabled: Iterable[str] = ()):
        self._backends: Dict[str, CalendarBackend] = {}
        self._enabled: Set[str] = set(enabled)

    def register(self, backend: CalendarBackend) -> None:
        self._backends[backend.name] = backend

    def all(self) -> List[CalendarBackend]:
        return list(self._backends.values())

    def enabled(self) -> Set[str]:
        """Names of backends that are both registered and enabled."""
        return {name for name in self._backends if name in self._enabled}

    def is_enabled(self, name: str) -> bool:
        return name in self.enabled()

    def exists(self, name: str) -> bool:
        return name in self._backends

    def find(self, name: str) -> CalendarBackend:
        try:
            return self._backends[name]
        except KeyError:
            raise BackendNotFoundError(f"Backend '{name}' does not exist") from None

    def default(self) -> CalendarBackend:
        if not self._backends:
            raise BackendNotFoundError("No backends registered")
        return next(iter(self._backends.values()))
