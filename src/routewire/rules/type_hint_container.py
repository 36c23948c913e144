from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from routewire.rules.base import BaseRule
from routewire.types import (
    BuiltinType,
    NamedType,
    NullableType,
    ParameterDescriptor,
    ResolvedArguments,
    TypeDescriptor,
    UnionType,
    ValuePool,
)

_NOT_A_SERVICE = object()


class TypeHintContainerRule(BaseRule):
    """Inject type-hinted parameters from the service locator.

    Only a single named, non-builtin type is looked up (``Service`` or
    ``Service | None``). Union annotations such as ``A | B`` are never
    resolved here, even when one of the members is registered.
    """

    def resolve_parameters(
        self,
        unresolved: Sequence[ParameterDescriptor],
        pool: ValuePool,
        resolved: ResolvedArguments,
    ) -> ResolvedArguments:
        resolved = dict(resolved)
        for parameter in unresolved:
            identifier = self._service_identifier(parameter.type)
            if identifier is _NOT_A_SERVICE:
                continue
            if self.locator.has(identifier):
                resolved[parameter.position] = self.locator.get(identifier)
        return resolved

    def _service_identifier(self, type_descriptor: TypeDescriptor | None) -> Any:
        if type_descriptor is None or isinstance(type_descriptor, BuiltinType):
            return _NOT_A_SERVICE
        if isinstance(type_descriptor, UnionType):
            return _NOT_A_SERVICE
        if isinstance(type_descriptor, NullableType):
            inner = type_descriptor.inner
            return inner.identifier if isinstance(inner, NamedType) else _NOT_A_SERVICE
        return type_descriptor.identifier
