from __future__ import annotations

import threading
from collections.abc import Hashable, Mapping
from typing import Any, Protocol, runtime_checkable

from typing_extensions import Self


@runtime_checkable
class ServiceLocator(Protocol):
    """Read side of a service registry consumed by the rule chain.

    Keys are usually classes (for type-hinted parameters and rule classes) or
    strings (for ``dtoFactories`` and factory names). Implementations must
    tolerate concurrent ``has``/``get`` calls.
    """

    def has(self, key: Any) -> bool:
        """Return whether ``key`` can be fetched with ``get``.

        Args:
            key: Service key to look up.

        """

    def get(self, key: Any) -> Any:
        """Return the service registered under ``key``.

        Args:
            key: Service key to look up.

        """


class ServiceRegistry:
    """Store ready-made services keyed by class or name.

    Registration keys are unique: setting a key that already exists replaces
    the previous value. Reads and writes are serialized with a re-entrant
    lock so a registry can be shared by concurrent requests.
    """

    def __init__(self, services: Mapping[Hashable, Any] | None = None) -> None:
        self._services: dict[Hashable, Any] = dict(services or {})
        self._lock = threading.RLock()

    def set(self, key: Hashable, value: Any) -> Self:
        """Register ``value`` under ``key``.

        Args:
            key: Service key, typically a class or a string.
            value: Service instance, factory or plain value.

        """
        with self._lock:
            self._services[key] = value
        return self

    def unset(self, key: Hashable) -> Any | None:
        """Remove ``key`` and return its previous value, if any.

        Args:
            key: Service key to remove.

        """
        with self._lock:
            return self._services.pop(key, None)

    def has(self, key: Any) -> bool:
        try:
            with self._lock:
                return key in self._services
        except TypeError:
            # Unhashable keys (e.g. list annotations) are never registered.
            return False

    def get(self, key: Any) -> Any:
        with self._lock:
            try:
                return self._services[key]
            except KeyError:
                msg = f"No service is registered for key {key!r}."
                raise LookupError(msg) from None

    def __contains__(self, key: object) -> bool:
        return self.has(key)

    def __len__(self) -> int:
        return len(self._services)
