from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

RESERVED_POOL_KEYS: frozenset[str] = frozenset(
    {
        "__route__",
        "__routeParser__",
        "__routingResults__",
        "__basePath__",
    },
)
"""Routing internals that request attributes may carry but handlers never receive."""

MUTATING_METHODS: frozenset[str] = frozenset({"POST", "PATCH", "PUT"})


@runtime_checkable
class HttpRequest(Protocol):
    """The part of a server request the pool assembly and DTO rule rely on."""

    @property
    def method(self) -> str: ...

    def get_parsed_body(self) -> Mapping[str, Any] | None: ...

    def get_attributes(self) -> Mapping[str, Any]: ...


def build_value_pool(
    request: HttpRequest,
    response: Any,
    route_arguments: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Merge everything a handler may receive into one name-keyed pool.

    ``request`` and ``response`` come first, then route placeholders, then
    request attributes. An earlier source keeps its value when a later one
    uses the same key. Reserved routing keys are removed.

    Args:
        request: Current server request.
        response: Response object handed to the handler.
        route_arguments: Values captured from route placeholders.

    """
    pool: dict[str, Any] = {"request": request, "response": response}
    for source in (route_arguments or {}, request.get_attributes()):
        for key, value in source.items():
            pool.setdefault(key, value)

    for key in RESERVED_POOL_KEYS:
        pool.pop(key, None)
    return pool
